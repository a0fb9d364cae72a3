"""
Shared response models.

These Pydantic models define the health and error contracts used by
every router.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the /health endpoints."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    code: str
    details: Optional[str] = None
