"""
HealthFeed - article publishing backend.

This package contains all application source code organized by responsibility:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, sessions, errors and validation
- services/  : Publishing pipeline, upload staging and S3 relay
- database/  : Database access and query execution
- models/    : Pydantic models for request/response schemas
"""

__version__ = "0.1.0"
