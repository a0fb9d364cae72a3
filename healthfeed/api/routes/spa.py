"""
Client Routes - static assets and the single-page app fallback.

Registered last: any GET no API route matched is answered with the
matching file from the client's public directory, or with the client's
index.html so the browser-side router can take over.
"""
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from healthfeed.core.config import get_settings
from healthfeed.core.exceptions import NotFoundError
from healthfeed.core.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Client"])


def resolve_public_file(public_dir: Path, requested: str) -> Path | None:
    """
    Map a request path onto a file inside public_dir.

    Returns None for directories, missing files and any path that would
    escape public_dir.
    """
    if not requested:
        return None
    try:
        root = public_dir.resolve()
        candidate = (root / requested).resolve()
        if not candidate.is_relative_to(root):
            logger.warning(f"Refused path outside the client bundle: {requested!r}")
            return None
        if not candidate.is_file():
            return None
    except (OSError, ValueError) as e:
        # Null bytes and over-long names are not valid filesystem paths
        logger.warning(f"Refused unusable client path {requested!r}: {e}")
        return None
    return candidate


@router.get("/{full_path:path}", include_in_schema=False)
async def serve_client(full_path: str) -> FileResponse:
    settings = get_settings()

    asset = resolve_public_file(settings.client_public_dir, full_path)
    if asset is not None:
        return FileResponse(asset)

    if not settings.client_index_file.is_file():
        raise NotFoundError("Client bundle", str(settings.client_index_file.name))
    return FileResponse(settings.client_index_file)
