"""
Doctor Routes - public doctor profiles.

Endpoints:
- GET /doctor/{doctorId}.json: profile plus the ownProfile flag
"""
from fastapi import APIRouter, Depends

from healthfeed.api.dependencies import RowId, get_account_service, get_session_user
from healthfeed.core.logging_config import get_logger
from healthfeed.core.session import SessionUser
from healthfeed.models.article import DoctorProfileResponse
from healthfeed.models.common import ErrorResponse
from healthfeed.services.account_service import AccountService

logger = get_logger(__name__)

router = APIRouter(tags=["Doctors"])


@router.get(
    "/doctor/{doctor_id}.json",
    response_model=DoctorProfileResponse,
    responses={404: {"model": ErrorResponse, "description": "Doctor not found"}},
    summary="Doctor profile",
)
def get_doctor_profile(
    doctor_id: RowId,
    session_user: SessionUser = Depends(get_session_user),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Return the doctor's profile.

    ownProfile is true only when the viewer is logged in as a doctor
    and is this doctor.
    """
    profile = accounts.doctor_profile(session_user, doctor_id)
    logger.debug(f"Doctor profile {doctor_id} viewed, ownProfile={profile['ownProfile']}")
    return profile
