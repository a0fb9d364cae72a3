"""
Article Service - feeds, publishing and editing.

Publishing and editing with a picture run the same ordered steps:

    received -> staged -> validated -> relayed -> written

Each step raises on failure, which stops the submission right there:
an oversized file never reaches validation, an invalid form never
reaches the relay, and a failed relay never writes a row. The staged
file is removed whatever the outcome.

The async pipeline keeps blocking work off the event loop: the relay
and the database reads and writes run in the Starlette threadpool.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from healthfeed.core.exceptions import NotFoundError, Unauthorized, ValidationError
from healthfeed.core.logging_config import get_logger
from healthfeed.core.session import SessionUser
from healthfeed.core.validators import (
    sanitize_field,
    validate_article_fields,
    validate_upload_filename,
)
from healthfeed.database.repository import ArticleRepository, Row
from healthfeed.services.storage_service import StorageService
from healthfeed.services.upload_service import StagedFile, UploadStager

logger = get_logger(__name__)


class SubmissionStage(str, Enum):
    RECEIVED = "received"
    STAGED = "staged"
    VALIDATED = "validated"
    RELAYED = "relayed"
    WRITTEN = "written"


@dataclass
class ArticleSubmission:
    """Form fields of a publish or edit request, and how far it got."""
    title: Optional[str]
    subtitle: Optional[str]
    text: Optional[str]
    stage: SubmissionStage = SubmissionStage.RECEIVED
    staged_file: Optional[StagedFile] = None
    image_url: Optional[str] = None

    def advance(self, stage: SubmissionStage) -> None:
        logger.debug(f"Submission {self.stage.value} -> {stage.value}")
        self.stage = stage

    def validate(self) -> None:
        is_valid, error, field = validate_article_fields(self.title, self.subtitle, self.text)
        if not is_valid:
            raise ValidationError(error, field=field)
        self.title = sanitize_field(self.title)
        self.subtitle = sanitize_field(self.subtitle)
        self.text = sanitize_field(self.text)
        self.advance(SubmissionStage.VALIDATED)


class ArticleService:
    """
    Orchestrates article reads and writes.

    Example:
        >>> service = ArticleService(ArticleRepository(), UploadStager(), StorageService())
        >>> row = await service.publish(session_user, upload, "Title", "Sub", "Body")
        >>> row["image_url"]
        'https://s3.amazonaws.com/buckethealthformusic/Xy3k.png'
    """

    def __init__(
        self,
        repository: ArticleRepository,
        stager: UploadStager,
        storage: StorageService,
    ):
        self.repository = repository
        self.stager = stager
        self.storage = storage

    # ------------------------------------------------------------------
    # Feeds
    # ------------------------------------------------------------------

    def list_articles(self) -> List[Row]:
        return self.repository.list_articles()

    def list_more_articles(self, smallest_id: int) -> List[Row]:
        return self.repository.list_more_articles(smallest_id)

    def list_doctor_articles(self, doctor_id: int) -> List[Row]:
        return self.repository.list_doctor_articles(doctor_id)

    def list_more_doctor_articles(self, doctor_id: int, smallest_id: int) -> List[Row]:
        return self.repository.list_more_doctor_articles(doctor_id, smallest_id)

    def get_article(self, article_id: int) -> Row:
        row = self.repository.get_article(article_id)
        if row is None:
            raise NotFoundError("Article", article_id)
        return row

    # ------------------------------------------------------------------
    # Publishing / editing
    # ------------------------------------------------------------------

    def get_article_for_edit(self, session_user: SessionUser, article_id: int) -> Row:
        """Article fields for the edit form; only its author may read them."""
        row = self.repository.get_article_for_edit(article_id)
        if row is None:
            raise NotFoundError("Article", article_id)
        if row["doctor_id"] != session_user.user_id:
            logger.warning(
                f"Doctor {session_user.user_id} tried to edit article {article_id} "
                f"of doctor {row['doctor_id']}"
            )
            raise Unauthorized("You can only edit your own articles.")
        return row

    async def publish(
        self,
        session_user: SessionUser,
        upload: Optional[UploadFile],
        title: Optional[str],
        subtitle: Optional[str],
        text: Optional[str],
    ) -> Row:
        """Publish a new article with an image."""
        submission = ArticleSubmission(title=title, subtitle=subtitle, text=text)
        await self._stage_validate_relay(submission, upload)

        row = await run_in_threadpool(
            self.repository.add_article,
            doctor_id=session_user.user_id,
            title=submission.title,
            subtitle=submission.subtitle,
            text=submission.text,
            image_url=submission.image_url,
        )
        submission.advance(SubmissionStage.WRITTEN)
        return row

    async def edit_with_picture(
        self,
        session_user: SessionUser,
        article_id: int,
        upload: Optional[UploadFile],
        title: Optional[str],
        subtitle: Optional[str],
        text: Optional[str],
    ) -> Row:
        """Replace the text and the image of an existing article."""
        await run_in_threadpool(self.get_article_for_edit, session_user, article_id)

        submission = ArticleSubmission(title=title, subtitle=subtitle, text=text)
        await self._stage_validate_relay(submission, upload)

        row = await run_in_threadpool(
            self.repository.update_article_with_pic,
            article_id,
            submission.title,
            submission.subtitle,
            submission.text,
            submission.image_url,
        )
        if row is None:
            raise NotFoundError("Article", article_id)
        submission.advance(SubmissionStage.WRITTEN)
        return row

    def edit_text(
        self,
        session_user: SessionUser,
        article_id: int,
        title: Optional[str],
        subtitle: Optional[str],
        text: Optional[str],
    ) -> Row:
        """Replace the text fields of an existing article."""
        self.get_article_for_edit(session_user, article_id)

        submission = ArticleSubmission(title=title, subtitle=subtitle, text=text)
        submission.validate()

        row = self.repository.update_article_text(
            article_id, submission.title, submission.subtitle, submission.text
        )
        if row is None:
            raise NotFoundError("Article", article_id)
        submission.advance(SubmissionStage.WRITTEN)
        return row

    async def _stage_validate_relay(
        self,
        submission: ArticleSubmission,
        upload: Optional[UploadFile],
    ) -> None:
        is_valid, error = validate_upload_filename(upload.filename if upload else None)
        if not is_valid:
            raise ValidationError(error, field="file")

        submission.staged_file = await self.stager.stage(upload)
        submission.advance(SubmissionStage.STAGED)
        try:
            submission.validate()
            submission.image_url = await run_in_threadpool(
                self.storage.relay,
                submission.staged_file.path,
                submission.staged_file.content_type,
            )
            submission.advance(SubmissionStage.RELAYED)
        finally:
            self.stager.discard(submission.staged_file)
