"""
FastAPI dependencies shared by the routers.

The session cookie is decoded by SessionMiddleware; get_session_user
turns it into a SessionUser once per request (FastAPI caches dependency
results within a request), and the guards build on it.
"""
from typing import Annotated

from fastapi import Depends, Path, Request

from healthfeed.core.exceptions import Unauthenticated, Unauthorized
from healthfeed.core.session import SessionUser, session_user_from
from healthfeed.core.validators import MAX_ROW_ID
from healthfeed.database.repository import AccountRepository, ArticleRepository
from healthfeed.services.account_service import AccountService
from healthfeed.services.article_service import ArticleService
from healthfeed.services.storage_service import StorageService, get_storage_service
from healthfeed.services.upload_service import UploadStager

# Ids and feed cursors taken from the URL; out-of-range values get a 422
RowId = Annotated[int, Path(ge=0, le=MAX_ROW_ID)]


def get_session_user(request: Request) -> SessionUser:
    """Identity carried by this request's session cookie."""
    return session_user_from(request.session)


def require_session(session_user: SessionUser = Depends(get_session_user)) -> SessionUser:
    """Reject requests without a logged in account (401)."""
    if not session_user.is_authenticated:
        raise Unauthenticated()
    return session_user


def require_doctor(session_user: SessionUser = Depends(require_session)) -> SessionUser:
    """Reject logged in accounts that are not doctors (403)."""
    if not session_user.is_doctor:
        raise Unauthorized("Only doctors can publish or edit articles.")
    return session_user


def get_article_service(
    storage: StorageService = Depends(get_storage_service),
) -> ArticleService:
    return ArticleService(ArticleRepository(), UploadStager(), storage)


def get_account_service() -> AccountService:
    return AccountService(AccountRepository())
