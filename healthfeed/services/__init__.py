"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No routing concerns (those belong in api/)
- No SQL (that belongs in database/)
- Orchestrate between the database, the upload staging area and S3
"""
from healthfeed.services.account_service import AccountService
from healthfeed.services.article_service import ArticleService, ArticleSubmission, SubmissionStage
from healthfeed.services.storage_service import StorageService, get_storage_service
from healthfeed.services.upload_service import StagedFile, UploadStager, random_filename

__all__ = [
    "AccountService",
    "ArticleService",
    "ArticleSubmission",
    "SubmissionStage",
    "StorageService",
    "get_storage_service",
    "StagedFile",
    "UploadStager",
    "random_filename",
]
