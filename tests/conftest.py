# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Points the app at a throwaway SQLite file, upload dir and client bundle
#   before any healthfeed import (settings are read once and cached)
# - Rebuilds and reseeds the tables for every test
# - Replaces the S3 relay with an in-memory recorder
# =============================================================================

import os
import tempfile
from pathlib import Path

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="healthfeed-tests-"))
_CLIENT_DIR = _TMP_ROOT / "client"
(_CLIENT_DIR / "public").mkdir(parents=True)
(_CLIENT_DIR / "index.html").write_text("<html><body><div id='root'></div></body></html>")
(_CLIENT_DIR / "public" / "styles.css").write_text("body { margin: 0; }")
(_TMP_ROOT / "secret.txt").write_text("outside the bundle")

os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_ROOT / 'healthfeed-test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP_ROOT / "uploads")
os.environ["LOG_DIR"] = str(_TMP_ROOT / "logs")
os.environ["CLIENT_PUBLIC_DIR"] = str(_CLIENT_DIR / "public")
os.environ["CLIENT_INDEX_FILE"] = str(_CLIENT_DIR / "index.html")
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["S3_BUCKET"] = "test-bucket"
os.environ["S3_PUBLIC_BASE_URL"] = "https://s3.amazonaws.com"
os.environ["ARTICLE_PAGE_SIZE"] = "3"
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("ENABLE_AUDIT_LOGGING", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from healthfeed.api.main import app
from healthfeed.core.config import get_settings
from healthfeed.core.exceptions import StorageError
from healthfeed.database import drop_tables, get_database, init_tables, seed_demo_accounts
from healthfeed.database.models import Doctor
from healthfeed.database.repository import AccountRepository, ArticleRepository
from healthfeed.services.storage_service import get_storage_service


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 1024


class FakeStorage:
    """Records relays instead of talking to S3."""

    def __init__(self):
        self.settings = get_settings()
        self.relayed = []
        self.fail = False

    def relay(self, path: Path, content_type=None) -> str:
        # The staged file must still exist while it is being relayed
        assert path.is_file()
        if self.fail:
            raise StorageError(details=f"key={path.name}")
        self.relayed.append(
            {"key": path.name, "content_type": content_type, "size": path.stat().st_size}
        )
        return self.settings.public_url_for(path.name)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture(autouse=True)
def fresh_database():
    """Empty tables plus the two demo accounts."""
    drop_tables()
    init_tables()
    seed_demo_accounts()
    yield get_database()


@pytest.fixture
def storage():
    fake = FakeStorage()
    app.dependency_overrides[get_storage_service] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_storage_service, None)


@pytest.fixture
def client(storage):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def doctor_client(client):
    """Client logged in as the demo doctor."""
    response = client.post("/add-doctor.json")
    assert response.status_code == 200
    return client


@pytest.fixture
def user_client(client):
    """Client logged in as the demo user."""
    response = client.post("/add-user.json")
    assert response.status_code == 200
    return client


@pytest.fixture
def demo_doctor_id(settings):
    return AccountRepository().fake_login_doctor(settings.demo_doctor_email)["id"]


@pytest.fixture
def demo_user_id(settings):
    return AccountRepository().fake_login_user(settings.demo_user_email)["id"]


@pytest.fixture
def other_doctor_id(fresh_database):
    """A second doctor who did not write the test articles."""
    with fresh_database.get_session() as session:
        result = session.execute(
            insert(Doctor.__table__)
            .values(first="Lee", last="Park", email="lee.park@example.com", specialty="Cardiology")
            .returning(Doctor.__table__.c.id)
        )
        return result.scalar_one()


@pytest.fixture
def make_articles():
    """Insert `count` articles for a doctor, returning the new rows oldest first."""

    def _make(doctor_id: int, count: int = 1):
        repository = ArticleRepository()
        return [
            repository.add_article(
                doctor_id=doctor_id,
                title=f"Title {n}",
                subtitle=f"Subtitle {n}",
                text=f"Body {n}",
                image_url=f"https://s3.amazonaws.com/test-bucket/image-{n}.png",
            )
            for n in range(count)
        ]

    return _make


@pytest.fixture
def staged_files(settings):
    """Names of files currently left in the staging directory."""

    def _list():
        if not settings.upload_dir.exists():
            return []
        return sorted(p.name for p in settings.upload_dir.iterdir())

    return _list
