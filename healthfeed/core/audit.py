"""
Audit Middleware - one log line per request.

Each line records who asked for what and how it went:
- method, path and status
- time spent in the application
- the session identity (userId and doctor flag) if a cookie was sent
- the declared body size of multipart writes (article uploads)

Health probes are logged at DEBUG so they do not drown the audit trail.
"""
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from healthfeed.core.logging_config import get_logger
from healthfeed.core.session import session_user_from

logger = get_logger(__name__)

QUIET_PREFIXES = ("/health",)


def describe_session(request: Request) -> str:
    """userId plus a d/u marker, or '-' for anonymous requests."""
    session = request.scope.get("session")
    if not session:
        return "-"
    user = session_user_from(session)
    if not user.is_authenticated:
        return "-"
    return f"{user.user_id}{'d' if user.is_doctor else 'u'}"


def upload_size(request: Request) -> Optional[str]:
    content_type = request.headers.get("content-type", "")
    if request.method == "POST" and content_type.startswith("multipart/"):
        return request.headers.get("content-length", "?")
    return None


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Writes the audit line for every request.

    Must be added before SessionMiddleware (so it runs inside it) for
    the session identity to be visible.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        who = describe_session(request)
        size = upload_size(request)

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.perf_counter() - started
            logger.error(
                f"FAILED {request.method} {request.url.path} "
                f"user={who} after {elapsed:.3f}s: {e}"
            )
            raise

        elapsed = time.perf_counter() - started
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"

        line = f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.3f}s user={who}"
        if size is not None:
            line += f" upload={size}B"

        if request.url.path.startswith(QUIET_PREFIXES):
            logger.debug(line)
        elif response.status_code >= 500:
            logger.error(line)
        elif response.status_code >= 400:
            logger.warning(line)
        else:
            logger.info(line)

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds nosniff, frame denial and a referrer policy to every response."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response
