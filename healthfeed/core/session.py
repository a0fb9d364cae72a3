"""
Session handling - signed cookie sessions.

The cookie itself is signed and decoded by Starlette's SessionMiddleware
(itsdangerous). This module turns the decoded dict into an explicit
SessionUser value once per request, and owns the two mutations the API
performs on it: logging in and logging out.

Session keys on the wire:
- userId: integer id of the doctor or user row
- doctor: True for doctors, False for plain users
"""
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from healthfeed.core.logging_config import get_logger

logger = get_logger(__name__)

USER_ID_KEY = "userId"
DOCTOR_KEY = "doctor"


@dataclass(frozen=True)
class SessionUser:
    """
    Identity carried by the session cookie.

    Both fields are None for an unauthenticated request (missing,
    malformed or expired cookie).
    """
    user_id: Optional[int] = None
    doctor: Optional[bool] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_doctor(self) -> bool:
        return self.is_authenticated and self.doctor is True

    def owns_profile(self, doctor_id: int) -> bool:
        """True iff this session is the doctor whose profile is viewed."""
        return self.is_doctor and self.user_id == doctor_id

    def to_dict(self) -> dict:
        return {USER_ID_KEY: self.user_id, DOCTOR_KEY: self.doctor}


def session_user_from(session: MutableMapping[str, Any]) -> SessionUser:
    """
    Build a SessionUser from a decoded session mapping.

    Values that do not have the expected type are ignored rather than
    trusted, so a tampered-but-validly-signed payload still yields an
    unauthenticated identity.
    """
    user_id = session.get(USER_ID_KEY)
    doctor = session.get(DOCTOR_KEY)

    if isinstance(user_id, bool) or not isinstance(user_id, int):
        if user_id is not None:
            logger.warning(f"Ignoring malformed session userId: {user_id!r}")
        return SessionUser()

    if not isinstance(doctor, bool):
        doctor = None

    return SessionUser(user_id=user_id, doctor=doctor)


def log_in(session: MutableMapping[str, Any], user_id: int, doctor: bool) -> SessionUser:
    """Store the identity of a freshly logged in account."""
    session[USER_ID_KEY] = int(user_id)
    session[DOCTOR_KEY] = bool(doctor)
    logger.info(f"Session opened: userId={user_id} doctor={bool(doctor)}")
    return SessionUser(user_id=int(user_id), doctor=bool(doctor))


def log_out(session: MutableMapping[str, Any]) -> None:
    """Remove both identity keys from the session."""
    user_id = session.pop(USER_ID_KEY, None)
    session.pop(DOCTOR_KEY, None)
    logger.info(f"Session cleared: userId={user_id}")
