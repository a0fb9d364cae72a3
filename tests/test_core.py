# =============================================================================
# tests/test_core.py - Core Module Tests
# =============================================================================
# This module contains tests for:
# - Article field and article id validation
# - Exception payloads and status codes
# - Settings helpers
# =============================================================================

from __future__ import annotations

import dataclasses

import pytest

from healthfeed.core.config import INSECURE_SESSION_SECRET, _normalize_database_url
from healthfeed.core.exceptions import (
    DatabaseError,
    FileTooLargeError,
    NotFoundError,
    StorageError,
    Unauthenticated,
    Unauthorized,
    UpstreamError,
    ValidationError,
)
from healthfeed.core.validators import (
    MISSING_FIELDS_MESSAGE,
    MISSING_FILE_MESSAGE,
    parse_article_id,
    sanitize_field,
    validate_article_fields,
    validate_upload_filename,
)


# =============================================================================
# Validator Tests
# =============================================================================

class TestArticleFields:
    """Test validate_article_fields and sanitize_field."""

    def test_all_fields_present(self):
        assert validate_article_fields("T", "S", "Body") == (True, None, None)

    @pytest.mark.parametrize(
        "title,subtitle,text,field",
        [
            (None, "S", "B", "title"),
            ("T", "", "B", "subtitle"),
            ("T", "S", " \n\t ", "text"),
            ("\x00", "S", "B", "title"),
        ],
    )
    def test_blank_fields(self, title, subtitle, text, field):
        assert validate_article_fields(title, subtitle, text) == (False, MISSING_FIELDS_MESSAGE, field)

    def test_sanitize_keeps_inner_whitespace(self):
        assert sanitize_field("  one\n\ntwo \x00 ") == "one\n\ntwo"
        assert sanitize_field(None) == ""


class TestUploadFilename:
    """Test validate_upload_filename."""

    def test_present(self):
        assert validate_upload_filename("scan.png") == (True, None)

    @pytest.mark.parametrize("filename", [None, "", "   "])
    def test_missing(self, filename):
        assert validate_upload_filename(filename) == (False, MISSING_FILE_MESSAGE)


class TestParseArticleId:
    """Test parse_article_id."""

    @pytest.mark.parametrize("value,expected", [(3, 3), ("3", 3), (" 12 ", 12)])
    def test_valid(self, value, expected):
        assert parse_article_id(value) == (True, expected, None)

    def test_largest_row_id(self):
        assert parse_article_id(2**63 - 1) == (True, 2**63 - 1, None)

    @pytest.mark.parametrize("value", [None, "", "abc", "1.5", 0, -4, True, 2**63])
    def test_invalid(self, value):
        is_valid, article_id, error = parse_article_id(value)

        assert is_valid is False
        assert article_id is None
        assert error


# =============================================================================
# Exception Tests
# =============================================================================

class TestExceptions:
    """Test the error hierarchy."""

    @pytest.mark.parametrize(
        "exc,status,code",
        [
            (ValidationError("bad", field="title"), 400, "validation_error"),
            (FileTooLargeError(2 * 1024 * 1024), 413, "file_too_large"),
            (Unauthenticated(), 401, "unauthenticated"),
            (Unauthorized(), 403, "unauthorized"),
            (NotFoundError("Article", 3), 404, "not_found"),
            (StorageError(), 502, "storage_error"),
            (DatabaseError(), 500, "database_error"),
        ],
    )
    def test_status_and_code(self, exc, status, code):
        assert exc.status_code == status
        assert exc.error_code == code
        assert exc.to_dict()["code"] == code

    def test_validation_payload(self):
        assert ValidationError("Fill it in", field="text").to_dict() == {
            "error": "Fill it in",
            "code": "validation_error",
            "details": "field=text",
        }

    def test_not_found_message(self):
        exc = NotFoundError("Doctor", 9)

        assert exc.message == "Doctor not found: 9"
        assert exc.details == "id=9"

    def test_file_too_large_mentions_limit(self):
        exc = FileTooLargeError(2 * 1024 * 1024)

        assert "2048 KB" in exc.message
        assert exc.max_bytes == 2 * 1024 * 1024

    def test_upstream_family(self):
        assert isinstance(StorageError(), UpstreamError)
        assert isinstance(DatabaseError(), UpstreamError)


# =============================================================================
# Settings Tests
# =============================================================================

class TestSettings:
    """Test settings loaded for the test run."""

    def test_loaded_from_environment(self, settings):
        assert settings.s3_bucket == "test-bucket"
        assert settings.article_page_size == 3
        assert settings.max_upload_bytes == 2 * 1024 * 1024
        assert settings.session_max_age_seconds == 14 * 24 * 60 * 60

    def test_public_url(self, settings):
        assert settings.public_url_for("abc.png") == "https://s3.amazonaws.com/test-bucket/abc.png"

    def test_public_url_ignores_trailing_slash(self, settings):
        custom = dataclasses.replace(settings, s3_public_base_url="https://cdn.example.com/")

        assert custom.public_url_for("abc.png") == "https://cdn.example.com/test-bucket/abc.png"

    def test_insecure_secret_detection(self, settings):
        assert settings.uses_insecure_secret() is False
        assert dataclasses.replace(settings, session_secret=INSECURE_SESSION_SECRET).uses_insecure_secret()

    def test_settings_are_frozen(self, settings):
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.s3_bucket = "other"

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@h/db", "postgresql://u:p@h/db"),
            ("mysql://u:p@h/db", "mysql+pymysql://u:p@h/db"),
            ("sqlite:///x.db", "sqlite:///x.db"),
        ],
    )
    def test_normalize_database_url(self, url, expected):
        assert _normalize_database_url(url) == expected
