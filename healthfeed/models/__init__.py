"""
Models module - Pydantic schemas for data validation.

This module defines:
- Request models: Input validation for API endpoints
- Response models: Output formatting for API responses
"""
from healthfeed.models.article import (
    ArticleResponse,
    DoctorProfile,
    DoctorProfileResponse,
    EditArticleTextRequest,
    SessionIdentity,
    UserProfile,
)
from healthfeed.models.common import ErrorResponse, HealthResponse

__all__ = [
    "ArticleResponse",
    "DoctorProfile",
    "DoctorProfileResponse",
    "EditArticleTextRequest",
    "SessionIdentity",
    "UserProfile",
    "ErrorResponse",
    "HealthResponse",
]
