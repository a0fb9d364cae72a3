"""
Article Routes - feeds, single articles, publishing and editing.

Feeds use keyset pagination: the client sends the smallest article id
it has already seen and receives the next rows below it, newest first.

Endpoints:
- GET /articles.json
- GET /more-articles/{smallestId}.json
- GET /single-article/{articleId}.json
- GET /doctor-articles/{doctorId}.json
- GET /more-doctor-articles/{doctorId}/{smallestId}.json
- POST /add-new-article.json (multipart)
- GET /edit-article/{articleId}
- POST /edit-article-with-pic.json (multipart)
- POST /edit-article-text.json
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from healthfeed.api.dependencies import RowId, get_article_service, require_doctor
from healthfeed.core.exceptions import ValidationError
from healthfeed.core.logging_config import get_logger
from healthfeed.core.session import SessionUser
from healthfeed.core.validators import parse_article_id
from healthfeed.models.article import ArticleResponse, EditArticleTextRequest
from healthfeed.models.common import ErrorResponse
from healthfeed.services.article_service import ArticleService

logger = get_logger(__name__)

router = APIRouter(
    tags=["Articles"],
    responses={
        500: {"model": ErrorResponse, "description": "Database error"},
    }
)

WRITE_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing field or file"},
    401: {"model": ErrorResponse, "description": "Not logged in"},
    403: {"model": ErrorResponse, "description": "Not a doctor, or not the author"},
    404: {"model": ErrorResponse, "description": "Article not found"},
    413: {"model": ErrorResponse, "description": "File larger than the upload cap"},
    502: {"model": ErrorResponse, "description": "Object storage relay failed"},
}


def _article_id_or_raise(value) -> int:
    is_valid, article_id, error = parse_article_id(value)
    if not is_valid:
        logger.debug(f"Rejected articleId {value!r}: {error}")
        raise ValidationError(error, field="articleId")
    return article_id


# ============================================================
# Feeds
# ============================================================

@router.get("/articles.json", response_model=List[ArticleResponse], summary="First page of articles")
def list_articles(articles: ArticleService = Depends(get_article_service)):
    return articles.list_articles()


@router.get(
    "/more-articles/{smallest_id}.json",
    response_model=List[ArticleResponse],
    summary="Next page of articles",
)
def list_more_articles(
    smallest_id: RowId,
    articles: ArticleService = Depends(get_article_service),
):
    """Articles with id strictly below smallest_id, newest first."""
    return articles.list_more_articles(smallest_id)


@router.get(
    "/single-article/{article_id}.json",
    response_model=ArticleResponse,
    responses={404: {"model": ErrorResponse, "description": "Article not found"}},
    summary="One article",
)
def get_single_article(
    article_id: RowId,
    articles: ArticleService = Depends(get_article_service),
):
    return articles.get_article(article_id)


@router.get(
    "/doctor-articles/{doctor_id}.json",
    response_model=List[ArticleResponse],
    summary="First page of a doctor's articles",
)
def list_doctor_articles(
    doctor_id: RowId,
    articles: ArticleService = Depends(get_article_service),
):
    return articles.list_doctor_articles(doctor_id)


@router.get(
    "/more-doctor-articles/{doctor_id}/{smallest_id}.json",
    response_model=List[ArticleResponse],
    summary="Next page of a doctor's articles",
)
def list_more_doctor_articles(
    doctor_id: RowId,
    smallest_id: RowId,
    articles: ArticleService = Depends(get_article_service),
):
    return articles.list_more_doctor_articles(doctor_id, smallest_id)


# ============================================================
# Publishing / editing
# ============================================================

@router.post(
    "/add-new-article.json",
    response_model=ArticleResponse,
    responses=WRITE_RESPONSES,
    summary="Publish an article with an image",
)
async def add_new_article(
    file: Optional[UploadFile] = File(default=None),
    title: Optional[str] = Form(default=None),
    subtitle: Optional[str] = Form(default=None),
    text: Optional[str] = Form(default=None),
    session_user: SessionUser = Depends(require_doctor),
    articles: ArticleService = Depends(get_article_service),
):
    """
    Publish a new article.

    The image is staged locally, the text fields are validated, the
    image is relayed to object storage and the row is written with the
    image's public URL.
    """
    logger.info(f"Publish request from doctor {session_user.user_id}")
    return await articles.publish(session_user, file, title, subtitle, text)


@router.get(
    "/edit-article/{article_id}",
    response_model=ArticleResponse,
    responses=WRITE_RESPONSES,
    summary="Fetch an article for editing",
)
def get_article_for_edit(
    article_id: RowId,
    session_user: SessionUser = Depends(require_doctor),
    articles: ArticleService = Depends(get_article_service),
):
    return articles.get_article_for_edit(session_user, article_id)


@router.post(
    "/edit-article-with-pic.json",
    response_model=ArticleResponse,
    responses=WRITE_RESPONSES,
    summary="Edit an article and replace its image",
)
async def edit_article_with_pic(
    file: Optional[UploadFile] = File(default=None),
    articleId: Optional[str] = Form(default=None),
    title: Optional[str] = Form(default=None),
    subtitle: Optional[str] = Form(default=None),
    text: Optional[str] = Form(default=None),
    session_user: SessionUser = Depends(require_doctor),
    articles: ArticleService = Depends(get_article_service),
):
    article_id = _article_id_or_raise(articleId)
    return await articles.edit_with_picture(session_user, article_id, file, title, subtitle, text)


@router.post(
    "/edit-article-text.json",
    response_model=ArticleResponse,
    responses=WRITE_RESPONSES,
    summary="Edit the text of an article",
)
def edit_article_text(
    body: EditArticleTextRequest,
    session_user: SessionUser = Depends(require_doctor),
    articles: ArticleService = Depends(get_article_service),
):
    article_id = _article_id_or_raise(body.articleId)
    return articles.edit_text(session_user, article_id, body.title, body.subtitle, body.text)
