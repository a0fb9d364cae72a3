"""
Account Service - placeholder logins and profile lookups.

There is no credential check in this build: the login endpoints sign
the caller in as the seeded demo doctor or demo user.
"""
from typing import Optional

from healthfeed.core.config import Settings, get_settings
from healthfeed.core.exceptions import NotFoundError, Unauthenticated
from healthfeed.core.logging_config import get_logger
from healthfeed.core.session import SessionUser
from healthfeed.database.repository import AccountRepository, Row

logger = get_logger(__name__)


class AccountService:
    """Doctor and user account operations."""

    def __init__(self, repository: AccountRepository, settings: Optional[Settings] = None):
        self.repository = repository
        self.settings = settings or get_settings()

    def fake_login_doctor(self) -> Row:
        """Row of the seeded doctor account."""
        row = self.repository.fake_login_doctor(self.settings.demo_doctor_email)
        if row is None:
            raise NotFoundError("Demo doctor account", self.settings.demo_doctor_email)
        return row

    def fake_login_user(self) -> Row:
        """Row of the seeded user account."""
        row = self.repository.fake_login_user(self.settings.demo_user_email)
        if row is None:
            raise NotFoundError("Demo user account", self.settings.demo_user_email)
        return row

    def current_profile(self, session_user: SessionUser) -> Row:
        """
        Profile row of the logged in account.

        Doctors get their doctor row, users their user row.
        """
        if not session_user.is_authenticated:
            raise Unauthenticated()

        if session_user.is_doctor:
            row = self.repository.get_doctor_account(session_user.user_id)
            resource = "Doctor"
        else:
            row = self.repository.get_user_by_id(session_user.user_id)
            resource = "User"

        if row is None:
            # The cookie outlived the account it points at
            logger.warning(f"Session points at missing {resource.lower()} {session_user.user_id}")
            raise NotFoundError(resource, session_user.user_id)
        return row

    def doctor_profile(self, session_user: SessionUser, doctor_id: int) -> dict:
        """Public profile of a doctor, flagged when it is the viewer's own."""
        row = self.repository.get_doctor_by_id(doctor_id)
        if row is None:
            raise NotFoundError("Doctor", doctor_id)
        return {"doctorInfo": row, "ownProfile": session_user.owns_profile(doctor_id)}
