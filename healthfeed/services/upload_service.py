"""
Upload Service - stages multipart files on local disk.

A staged file is a transient handoff buffer between the request and the
object-store relay: it gets a random name (24 random bytes, URL-safe
base64) that keeps the original extension, and it is removed once the
relay has run or the submission has been rejected.
"""
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

from healthfeed.core.config import Settings, get_settings
from healthfeed.core.exceptions import FileTooLargeError
from healthfeed.core.logging_config import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StagedFile:
    """A file written to the staging directory."""
    path: Path
    original_filename: str
    content_type: Optional[str]
    size: int

    @property
    def filename(self) -> str:
        return self.path.name


def random_filename(original_filename: str) -> str:
    """Random staging name that keeps the original extension."""
    return secrets.token_urlsafe(24) + os.path.splitext(original_filename)[1]


class UploadStager:
    """
    Writes uploads to the staging directory, enforcing the size cap.

    The cap is checked while streaming, so an oversized file is rejected
    as soon as it crosses the limit and the partial file is deleted.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.upload_dir = self.settings.upload_dir
        self.max_bytes = self.settings.max_upload_bytes

    async def stage(self, upload: UploadFile) -> StagedFile:
        """
        Stream an upload into the staging directory.

        Raises:
            FileTooLargeError: If the file is larger than the cap
        """
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        original = upload.filename or ""
        path = self.upload_dir / random_filename(original)

        size = 0
        try:
            with open(path, "wb") as buffer:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise FileTooLargeError(self.max_bytes)
                    buffer.write(chunk)
        except FileTooLargeError:
            logger.warning(f"Rejected upload '{original}': larger than {self.max_bytes} bytes")
            self.discard_path(path)
            raise
        finally:
            await upload.close()

        logger.debug(f"Staged '{original}' as {path.name} ({size} bytes)")
        return StagedFile(
            path=path,
            original_filename=original,
            content_type=upload.content_type,
            size=size,
        )

    def discard(self, staged: Optional[StagedFile]) -> None:
        """Remove a staged file, if any."""
        if staged is not None:
            self.discard_path(staged.path)

    @staticmethod
    def discard_path(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove staged file {path.name}: {e}")
