"""
Storage Service - relays staged uploads to S3.

The relay reads a file from the local staging directory and uploads it
to the configured bucket under the same name. The public URL is built
from configuration (S3_PUBLIC_BASE_URL / S3_BUCKET / filename), never
from whatever the upload call happens to return.

boto3 is synchronous; callers on the event loop run relay() in the
threadpool.
"""
from pathlib import Path
from typing import Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from healthfeed.core.config import Settings, get_settings
from healthfeed.core.exceptions import StorageError
from healthfeed.core.logging_config import get_logger

logger = get_logger(__name__)


class StorageService:
    """
    Uploads files to the article image bucket.

    The boto3 client is created on first use so that importing the
    application never needs AWS credentials.

    Example:
        >>> storage = StorageService()
        >>> url = storage.relay(Path("uploads/Xy3k.png"), content_type="image/png")
        >>> url
        'https://s3.amazonaws.com/buckethealthformusic/Xy3k.png'
    """

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("s3", region_name=self.settings.s3_region)
            logger.info(f"S3 client initialized for bucket '{self.settings.s3_bucket}'")
        return self._client

    def relay(self, path: Path, content_type: Optional[str] = None) -> str:
        """
        Upload a staged file and return its public URL.

        Args:
            path: Staged file; its name becomes the object key
            content_type: MIME type sent along with the object

        Returns:
            Public URL of the uploaded object

        Raises:
            StorageError: If the upload fails
        """
        key = path.name
        extra_args = {"ACL": "public-read"}
        if content_type:
            extra_args["ContentType"] = content_type

        try:
            self.client.upload_file(str(path), self.settings.s3_bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError, S3UploadFailedError) as e:
            logger.error(f"Relay of {key} to bucket '{self.settings.s3_bucket}' failed: {e}")
            raise StorageError(details=f"key={key}") from e

        url = self.settings.public_url_for(key)
        logger.info(f"Relayed {key} to {url}")
        return url


# Module-level instance (singleton pattern)
_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    """Get or create the storage service instance."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
