"""
Input Validators - Sanitization and validation utilities.

This module provides validation for article submissions:
- Required text fields (title, subtitle, text)
- Article id parsing for edit forms
- Uploaded file presence
"""
from typing import Optional, Tuple

from healthfeed.core.logging_config import get_logger

logger = get_logger(__name__)

MISSING_FIELDS_MESSAGE = "You must fill in all fields to publish an article."
MISSING_FILE_MESSAGE = "An image file is required to publish an article."

REQUIRED_ARTICLE_FIELDS = ("title", "subtitle", "text")

# Largest value a signed 64-bit INTEGER column can hold
MAX_ROW_ID = 2**63 - 1


def sanitize_field(value: Optional[str]) -> str:
    """
    Sanitize a submitted text field.

    - Removes null bytes
    - Strips leading/trailing whitespace

    Inner whitespace is kept; article bodies carry paragraphs.
    """
    if not value:
        return ""
    return value.replace("\x00", "").strip()


def validate_article_fields(
    title: Optional[str],
    subtitle: Optional[str],
    text: Optional[str],
) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Check that every required article field has content.

    Empty and whitespace-only values are both rejected.

    Returns:
        Tuple of (is_valid, error_message, offending_field)
    """
    values = {"title": title, "subtitle": subtitle, "text": text}
    for field in REQUIRED_ARTICLE_FIELDS:
        if not sanitize_field(values[field]):
            logger.debug(f"Article submission rejected: empty '{field}'")
            return False, MISSING_FIELDS_MESSAGE, field
    return True, None, None


def validate_upload_filename(filename: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Check that a multipart submission actually carried a file.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not filename or not filename.strip():
        return False, MISSING_FILE_MESSAGE
    return True, None


def parse_article_id(value) -> Tuple[bool, Optional[int], Optional[str]]:
    """
    Parse an article id sent as a form or JSON value.

    Returns:
        Tuple of (is_valid, article_id, error_message)
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return False, None, "articleId is required"
    if isinstance(value, bool):
        return False, None, "articleId must be an integer"
    try:
        article_id = int(value)
    except (TypeError, ValueError):
        return False, None, "articleId must be an integer"
    if article_id < 1:
        return False, None, "articleId must be positive"
    if article_id > MAX_ROW_ID:
        return False, None, "articleId is out of range"
    return True, article_id, None
