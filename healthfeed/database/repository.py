"""
Repositories - the parameterized queries behind every route.

ArticleRepository covers the feeds (keyset pagination on article id),
single-article reads and the publish/edit writes. AccountRepository
covers the doctor/user lookups and the placeholder logins.

All statements are SQLAlchemy Core constructs, so every value reaches
the driver as a bound parameter.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func, insert, select, update

from healthfeed.core.config import get_settings
from healthfeed.core.logging_config import get_logger
from healthfeed.database.executor import QueryExecutor
from healthfeed.database.models import Article, Doctor, User

logger = get_logger(__name__)

articles = Article.__table__
doctors = Doctor.__table__
users = User.__table__

Row = Dict[str, Any]

ARTICLE_COLUMNS = (
    articles.c.id,
    articles.c.doctor_id,
    articles.c.title,
    articles.c.subtitle,
    articles.c.text,
    articles.c.image_url,
    articles.c.created_at,
)

AUTHOR_COLUMNS = (
    doctors.c.first,
    doctors.c.last,
)

DOCTOR_PROFILE_COLUMNS = (
    doctors.c.id,
    doctors.c.first,
    doctors.c.last,
    doctors.c.specialty,
    doctors.c.bio,
    doctors.c.image_url,
    doctors.c.doctor,
    doctors.c.created_at,
)


class ArticleRepository:
    """
    Article queries.

    Feed pages are ordered by id descending. The next page after a
    client has seen ids down to `smallest_id` is every row with
    id < smallest_id, so inserts made while a client is paging never
    shift rows between pages.
    """

    def __init__(self, executor: Optional[QueryExecutor] = None, page_size: Optional[int] = None):
        self.executor = executor or QueryExecutor()
        self.page_size = page_size or get_settings().article_page_size

    def _feed(self, doctor_id: Optional[int] = None, smallest_id: Optional[int] = None):
        lowest = select(func.min(articles.c.id))
        if doctor_id is not None:
            lowest = lowest.where(articles.c.doctor_id == doctor_id)

        stmt = (
            select(*ARTICLE_COLUMNS, *AUTHOR_COLUMNS, lowest.scalar_subquery().label("lowest_id"))
            .select_from(articles.join(doctors, doctors.c.id == articles.c.doctor_id))
        )
        if doctor_id is not None:
            stmt = stmt.where(articles.c.doctor_id == doctor_id)
        if smallest_id is not None:
            stmt = stmt.where(articles.c.id < smallest_id)

        return stmt.order_by(articles.c.id.desc()).limit(self.page_size)

    def list_articles(self) -> List[Row]:
        """First page of the global feed."""
        return self.executor.execute(self._feed(), description="list articles").rows

    def list_more_articles(self, smallest_id: int) -> List[Row]:
        """Next page of the global feed, strictly below the cursor."""
        return self.executor.execute(
            self._feed(smallest_id=smallest_id),
            description=f"list articles below {smallest_id}",
        ).rows

    def list_doctor_articles(self, doctor_id: int) -> List[Row]:
        """First page of one doctor's articles."""
        return self.executor.execute(
            self._feed(doctor_id=doctor_id),
            description=f"list articles of doctor {doctor_id}",
        ).rows

    def list_more_doctor_articles(self, doctor_id: int, smallest_id: int) -> List[Row]:
        """Next page of one doctor's articles, strictly below the cursor."""
        return self.executor.execute(
            self._feed(doctor_id=doctor_id, smallest_id=smallest_id),
            description=f"list articles of doctor {doctor_id} below {smallest_id}",
        ).rows

    def get_article(self, article_id: int) -> Optional[Row]:
        """One article with its author's name."""
        stmt = (
            select(*ARTICLE_COLUMNS, *AUTHOR_COLUMNS)
            .select_from(articles.join(doctors, doctors.c.id == articles.c.doctor_id))
            .where(articles.c.id == article_id)
        )
        return self.executor.execute(stmt, description=f"get article {article_id}").first()

    def get_article_for_edit(self, article_id: int) -> Optional[Row]:
        """The editable fields of an article, plus its author id."""
        stmt = select(*ARTICLE_COLUMNS).where(articles.c.id == article_id)
        return self.executor.execute(stmt, description=f"get article {article_id} for edit").first()

    def add_article(
        self,
        doctor_id: int,
        title: str,
        subtitle: str,
        text: str,
        image_url: Optional[str],
    ) -> Row:
        """Insert an article and return the new row."""
        stmt = (
            insert(articles)
            .values(
                doctor_id=doctor_id,
                title=title,
                subtitle=subtitle,
                text=text,
                image_url=image_url,
            )
            .returning(*ARTICLE_COLUMNS)
        )
        row = self.executor.execute(stmt, description="insert article").first()
        logger.info(f"Article {row['id']} published by doctor {doctor_id}")
        return row

    def update_article_with_pic(
        self,
        article_id: int,
        title: str,
        subtitle: str,
        text: str,
        image_url: str,
    ) -> Optional[Row]:
        """Replace text fields and image of an article."""
        stmt = (
            update(articles)
            .where(articles.c.id == article_id)
            .values(title=title, subtitle=subtitle, text=text, image_url=image_url)
            .returning(*ARTICLE_COLUMNS)
        )
        return self.executor.execute(stmt, description=f"update article {article_id} with picture").first()

    def update_article_text(
        self,
        article_id: int,
        title: str,
        subtitle: str,
        text: str,
    ) -> Optional[Row]:
        """Replace the text fields of an article, keeping its image."""
        stmt = (
            update(articles)
            .where(articles.c.id == article_id)
            .values(title=title, subtitle=subtitle, text=text)
            .returning(*ARTICLE_COLUMNS)
        )
        return self.executor.execute(stmt, description=f"update article {article_id} text").first()


class AccountRepository:
    """Doctor and user lookups."""

    def __init__(self, executor: Optional[QueryExecutor] = None):
        self.executor = executor or QueryExecutor()

    def get_doctor_by_id(self, doctor_id: int) -> Optional[Row]:
        """Public profile of a doctor."""
        stmt = select(*DOCTOR_PROFILE_COLUMNS).where(doctors.c.id == doctor_id)
        return self.executor.execute(stmt, description=f"get doctor {doctor_id}").first()

    def get_doctor_account(self, doctor_id: int) -> Optional[Row]:
        """Full doctor row, including the email, for the owner's own view."""
        stmt = select(*DOCTOR_PROFILE_COLUMNS, doctors.c.email).where(doctors.c.id == doctor_id)
        return self.executor.execute(stmt, description=f"get doctor account {doctor_id}").first()

    def get_user_by_id(self, user_id: int) -> Optional[Row]:
        stmt = select(
            users.c.id, users.c.first, users.c.last, users.c.email, users.c.doctor, users.c.created_at
        ).where(users.c.id == user_id)
        return self.executor.execute(stmt, description=f"get user {user_id}").first()

    def fake_login_doctor(self, email: str) -> Optional[Row]:
        """Seeded doctor account used by the placeholder login."""
        stmt = (
            select(*DOCTOR_PROFILE_COLUMNS, doctors.c.email)
            .where(doctors.c.email == email)
            .order_by(doctors.c.id)
            .limit(1)
        )
        return self.executor.execute(stmt, description="fake login doctor").first()

    def fake_login_user(self, email: str) -> Optional[Row]:
        """Seeded user account used by the placeholder login."""
        stmt = (
            select(
                users.c.id, users.c.first, users.c.last, users.c.email, users.c.doctor, users.c.created_at
            )
            .where(users.c.email == email)
            .order_by(users.c.id)
            .limit(1)
        )
        return self.executor.execute(stmt, description="fake login user").first()
