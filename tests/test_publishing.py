# =============================================================================
# tests/test_publishing.py - Publish and Edit Tests
# =============================================================================
# This module contains tests for:
# - /add-new-article.json (stage, validate, relay, write)
# - /edit-article/{id}, /edit-article-with-pic.json, /edit-article-text.json
# - Session guards on every write route
#
# The S3 relay is replaced by the FakeStorage recorder from conftest.py.
# =============================================================================

from __future__ import annotations

import pytest

from healthfeed.core.config import TWO_MIB
from healthfeed.core.exceptions import DatabaseError
from healthfeed.core.validators import MISSING_FIELDS_MESSAGE, MISSING_FILE_MESSAGE
from healthfeed.database.repository import ArticleRepository

from tests.conftest import PNG_BYTES


def _article_form(**overrides):
    form = {"title": "Sleep and rhythm", "subtitle": "Why tempo matters", "text": "Slow music helps."}
    form.update(overrides)
    return form


def _image(name="scan.png", content=PNG_BYTES, content_type="image/png"):
    return {"file": (name, content, content_type)}


# =============================================================================
# Publish Tests
# =============================================================================

class TestPublish:
    """Test publishing a new article."""

    def test_publish_relays_image_and_writes_row(self, doctor_client, storage, settings, demo_doctor_id, staged_files):
        response = doctor_client.post("/add-new-article.json", data=_article_form(), files=_image())

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Sleep and rhythm"
        assert body["doctor_id"] == demo_doctor_id
        assert body["image_url"].startswith("https://s3.amazonaws.com/test-bucket/")
        assert body["image_url"].endswith(".png")

        assert len(storage.relayed) == 1
        relayed = storage.relayed[0]
        assert body["image_url"] == settings.public_url_for(relayed["key"])
        assert relayed["content_type"] == "image/png"
        assert relayed["size"] == len(PNG_BYTES)

        feed = doctor_client.get("/articles.json").json()
        assert [row["id"] for row in feed] == [body["id"]]
        assert staged_files() == []

    def test_staged_name_is_random_and_keeps_extension(self, doctor_client, storage):
        doctor_client.post("/add-new-article.json", data=_article_form(), files=_image("my photo.JPG"))
        doctor_client.post("/add-new-article.json", data=_article_form(), files=_image("my photo.JPG"))

        keys = [item["key"] for item in storage.relayed]
        assert len(keys) == 2
        assert keys[0] != keys[1]
        assert all(key.endswith(".JPG") for key in keys)
        assert all("my photo" not in key for key in keys)

    def test_fields_are_trimmed(self, doctor_client, storage):
        response = doctor_client.post(
            "/add-new-article.json",
            data=_article_form(title="  Padded title  "),
            files=_image(),
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Padded title"

    @pytest.mark.parametrize("field", ["title", "subtitle", "text"])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_field_is_rejected_before_relay(self, doctor_client, storage, staged_files, field, value):
        response = doctor_client.post(
            "/add-new-article.json",
            data=_article_form(**{field: value}),
            files=_image(),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == MISSING_FIELDS_MESSAGE
        assert body["details"] == f"field={field}"
        assert storage.relayed == []
        assert doctor_client.get("/articles.json").json() == []
        assert staged_files() == []

    def test_missing_field_is_rejected(self, doctor_client, storage):
        form = _article_form()
        del form["subtitle"]

        response = doctor_client.post("/add-new-article.json", data=form, files=_image())

        assert response.status_code == 400
        assert response.json()["error"] == MISSING_FIELDS_MESSAGE
        assert storage.relayed == []

    def test_missing_file_is_rejected(self, doctor_client, storage):
        response = doctor_client.post("/add-new-article.json", data=_article_form())

        assert response.status_code == 400
        assert response.json()["error"] == MISSING_FILE_MESSAGE
        assert storage.relayed == []

    def test_oversized_file_is_rejected_before_validation(self, doctor_client, storage, staged_files):
        # Blank title as well: the size check must win
        response = doctor_client.post(
            "/add-new-article.json",
            data=_article_form(title=""),
            files=_image(content=b"\x00" * (TWO_MIB + 1)),
        )

        assert response.status_code == 413
        assert response.json()["code"] == "file_too_large"
        assert storage.relayed == []
        assert doctor_client.get("/articles.json").json() == []
        assert staged_files() == []

    def test_file_at_the_cap_is_accepted(self, doctor_client, storage):
        response = doctor_client.post(
            "/add-new-article.json",
            data=_article_form(),
            files=_image(content=b"\x00" * TWO_MIB),
        )

        assert response.status_code == 200
        assert storage.relayed[0]["size"] == TWO_MIB

    def test_relay_failure_writes_nothing(self, doctor_client, storage, staged_files):
        storage.fail = True

        response = doctor_client.post("/add-new-article.json", data=_article_form(), files=_image())

        assert response.status_code == 502
        assert response.json()["code"] == "storage_error"
        assert doctor_client.get("/articles.json").json() == []
        assert staged_files() == []

    def test_write_failure_after_relay(self, doctor_client, storage, staged_files, monkeypatch):
        def broken_insert(self, **values):
            raise DatabaseError(details="insert article")

        monkeypatch.setattr(ArticleRepository, "add_article", broken_insert)

        response = doctor_client.post("/add-new-article.json", data=_article_form(), files=_image())

        assert response.status_code == 500
        assert response.json()["code"] == "database_error"
        assert len(storage.relayed) == 1
        assert staged_files() == []

    def test_requires_login(self, client, storage):
        response = client.post("/add-new-article.json", data=_article_form(), files=_image())

        assert response.status_code == 401
        assert storage.relayed == []

    def test_plain_user_cannot_publish(self, user_client, storage):
        response = user_client.post("/add-new-article.json", data=_article_form(), files=_image())

        assert response.status_code == 403
        assert response.json()["code"] == "unauthorized"
        assert storage.relayed == []


# =============================================================================
# Edit Tests
# =============================================================================

@pytest.fixture
def own_article(make_articles, demo_doctor_id):
    return make_articles(demo_doctor_id, 1)[0]


@pytest.fixture
def foreign_article(make_articles, other_doctor_id):
    return make_articles(other_doctor_id, 1)[0]


class TestFetchForEdit:
    """Test /edit-article/{articleId}."""

    def test_author_gets_fields(self, doctor_client, own_article):
        response = doctor_client.get(f"/edit-article/{own_article['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == own_article["title"]
        assert body["image_url"] == own_article["image_url"]

    def test_other_doctor_is_forbidden(self, doctor_client, foreign_article):
        response = doctor_client.get(f"/edit-article/{foreign_article['id']}")

        assert response.status_code == 403

    def test_missing_article(self, doctor_client):
        response = doctor_client.get("/edit-article/9999")

        assert response.status_code == 404

    def test_requires_login(self, client, own_article):
        response = client.get(f"/edit-article/{own_article['id']}")

        assert response.status_code == 401


class TestEditWithPicture:
    """Test /edit-article-with-pic.json."""

    def test_replaces_text_and_image(self, doctor_client, storage, settings, own_article):
        response = doctor_client.post(
            "/edit-article-with-pic.json",
            data=_article_form(articleId=str(own_article["id"]), title="New title"),
            files=_image("cover.webp", content_type="image/webp"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == own_article["id"]
        assert body["title"] == "New title"
        assert body["image_url"] == settings.public_url_for(storage.relayed[0]["key"])
        assert body["image_url"].endswith(".webp")

        stored = doctor_client.get(f"/single-article/{own_article['id']}.json").json()
        assert stored["title"] == "New title"
        assert stored["image_url"] == body["image_url"]

    def test_other_doctor_is_forbidden(self, doctor_client, storage, foreign_article):
        response = doctor_client.post(
            "/edit-article-with-pic.json",
            data=_article_form(articleId=str(foreign_article["id"])),
            files=_image(),
        )

        assert response.status_code == 403
        assert storage.relayed == []

    @pytest.mark.parametrize("article_id", ["", "abc", "0"])
    def test_invalid_article_id(self, doctor_client, storage, article_id):
        response = doctor_client.post(
            "/edit-article-with-pic.json",
            data=_article_form(articleId=article_id),
            files=_image(),
        )

        assert response.status_code == 400
        assert response.json()["details"] == "field=articleId"
        assert storage.relayed == []

    def test_blank_field_keeps_article(self, doctor_client, storage, own_article):
        response = doctor_client.post(
            "/edit-article-with-pic.json",
            data=_article_form(articleId=str(own_article["id"]), text=" "),
            files=_image(),
        )

        assert response.status_code == 400
        assert storage.relayed == []
        stored = doctor_client.get(f"/single-article/{own_article['id']}.json").json()
        assert stored["text"] == own_article["text"]

    def test_write_failure_after_relay(self, doctor_client, storage, staged_files, own_article, monkeypatch):
        def broken_update(self, *args):
            raise DatabaseError(details="update article")

        monkeypatch.setattr(ArticleRepository, "update_article_with_pic", broken_update)

        response = doctor_client.post(
            "/edit-article-with-pic.json",
            data=_article_form(articleId=str(own_article["id"])),
            files=_image(),
        )

        assert response.status_code == 500
        assert response.json()["code"] == "database_error"
        assert len(storage.relayed) == 1
        assert staged_files() == []
        stored = doctor_client.get(f"/single-article/{own_article['id']}.json").json()
        assert stored["image_url"] == own_article["image_url"]


class TestEditText:
    """Test /edit-article-text.json."""

    def test_replaces_text_and_keeps_image(self, doctor_client, own_article):
        response = doctor_client.post(
            "/edit-article-text.json",
            json={"articleId": own_article["id"], "title": "T2", "subtitle": "S2", "text": "B2"},
        )

        assert response.status_code == 200
        body = response.json()
        assert (body["title"], body["subtitle"], body["text"]) == ("T2", "S2", "B2")
        assert body["image_url"] == own_article["image_url"]

    def test_accepts_string_article_id(self, doctor_client, own_article):
        response = doctor_client.post(
            "/edit-article-text.json",
            json={"articleId": str(own_article["id"]), "title": "T2", "subtitle": "S2", "text": "B2"},
        )

        assert response.status_code == 200

    def test_blank_field_is_rejected(self, doctor_client, own_article):
        response = doctor_client.post(
            "/edit-article-text.json",
            json={"articleId": own_article["id"], "title": "T2", "subtitle": "", "text": "B2"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == MISSING_FIELDS_MESSAGE

    def test_other_doctor_is_forbidden(self, doctor_client, foreign_article):
        response = doctor_client.post(
            "/edit-article-text.json",
            json={"articleId": foreign_article["id"], "title": "T2", "subtitle": "S2", "text": "B2"},
        )

        assert response.status_code == 403
        stored = doctor_client.get(f"/single-article/{foreign_article['id']}.json").json()
        assert stored["title"] == foreign_article["title"]

    def test_plain_user_is_forbidden(self, user_client, own_article):
        response = user_client.post(
            "/edit-article-text.json",
            json={"articleId": own_article["id"], "title": "T2", "subtitle": "S2", "text": "B2"},
        )

        assert response.status_code == 403

    def test_missing_article(self, doctor_client):
        response = doctor_client.post(
            "/edit-article-text.json",
            json={"articleId": 9999, "title": "T2", "subtitle": "S2", "text": "B2"},
        )

        assert response.status_code == 404

    def test_out_of_range_article_id(self, doctor_client):
        response = doctor_client.post(
            "/edit-article-text.json",
            json={"articleId": 2**63, "title": "T2", "subtitle": "S2", "text": "B2"},
        )

        assert response.status_code == 400
        assert response.json()["details"] == "field=articleId"

    def test_out_of_range_edit_fetch(self, doctor_client):
        response = doctor_client.get("/edit-article/99999999999999999999")

        assert response.status_code == 422
