"""
Account Routes - session identity, placeholder logins and logout.

Endpoints:
- GET /user/id.json: identity stored in the session cookie
- POST /add-doctor.json: log in as the demo doctor
- POST /add-user.json: log in as the demo user
- GET /user.json: profile of the logged in account
- GET /logout: clear the session and go back to /
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from healthfeed.api.dependencies import get_account_service, get_session_user, require_session
from healthfeed.core.logging_config import get_logger
from healthfeed.core.session import SessionUser, log_in, log_out
from healthfeed.models.article import DoctorProfile, SessionIdentity, UserProfile
from healthfeed.models.common import ErrorResponse
from healthfeed.services.account_service import AccountService

logger = get_logger(__name__)

router = APIRouter(
    tags=["Accounts"],
    responses={
        401: {"model": ErrorResponse, "description": "Not logged in"},
        404: {"model": ErrorResponse, "description": "Account not found"},
    }
)


@router.get(
    "/user/id.json",
    response_model=SessionIdentity,
    summary="Current session identity",
)
async def get_session_identity(
    session_user: SessionUser = Depends(get_session_user),
) -> SessionIdentity:
    """Return the session's userId and doctor flag; both null when logged out."""
    return SessionIdentity(**session_user.to_dict())


@router.post(
    "/add-doctor.json",
    response_model=DoctorProfile,
    summary="Log in as the demo doctor",
    description="Placeholder login: no credentials are checked.",
)
def login_doctor(
    request: Request,
    accounts: AccountService = Depends(get_account_service),
) -> DoctorProfile:
    row = accounts.fake_login_doctor()
    log_in(request.session, row["id"], row["doctor"])
    logger.debug(f"Placeholder doctor login as {row['email']}")
    return DoctorProfile(**row)


@router.post(
    "/add-user.json",
    response_model=UserProfile,
    summary="Log in as the demo user",
    description="Placeholder login: no credentials are checked.",
)
def login_user(
    request: Request,
    accounts: AccountService = Depends(get_account_service),
) -> UserProfile:
    row = accounts.fake_login_user()
    log_in(request.session, row["id"], row["doctor"])
    logger.debug(f"Placeholder user login as {row['email']}")
    return UserProfile(**row)


@router.get(
    "/user.json",
    summary="Profile of the logged in account",
)
def get_current_profile(
    session_user: SessionUser = Depends(require_session),
    accounts: AccountService = Depends(get_account_service),
):
    """Doctor row for doctors, user row for users."""
    row = accounts.current_profile(session_user)
    if session_user.is_doctor:
        return DoctorProfile(**row)
    return UserProfile(**row)


@router.get("/logout", summary="Clear the session")
async def logout(request: Request) -> RedirectResponse:
    log_out(request.session)
    return RedirectResponse(url="/", status_code=302)
