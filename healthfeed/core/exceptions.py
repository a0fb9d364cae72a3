"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- Used by the API layer for consistent error responses
- The "error" key of every payload carries the human-readable message
"""
from typing import Optional


class HealthFeedException(Exception):
    """
    Base exception for all HealthFeed errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.message,
            "code": self.error_code,
            "details": self.details
        }


class ValidationError(HealthFeedException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class FileTooLargeError(HealthFeedException):
    """Raised when an upload exceeds the configured size cap."""
    status_code = 413
    error_code = "file_too_large"

    def __init__(self, max_bytes: int):
        super().__init__(
            message=f"File is too large. The maximum size is {max_bytes // 1024} KB.",
            details=f"max_bytes={max_bytes}"
        )
        self.max_bytes = max_bytes


class Unauthenticated(HealthFeedException):
    """Raised when a route needs a session and the request has none."""
    status_code = 401
    error_code = "unauthenticated"

    def __init__(self, message: str = "You must be logged in to do this."):
        super().__init__(message)


class Unauthorized(HealthFeedException):
    """Raised when the session is valid but not allowed to act."""
    status_code = 403
    error_code = "unauthorized"

    def __init__(self, message: str = "You are not allowed to do this."):
        super().__init__(message)


class NotFoundError(HealthFeedException):
    """Raised when a requested row does not exist."""
    status_code = 404
    error_code = "not_found"

    def __init__(self, resource: str, identifier: Optional[object] = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} not found: {identifier}"
        super().__init__(
            message=message,
            details=f"id={identifier}" if identifier is not None else None
        )
        self.resource = resource
        self.identifier = identifier


class UpstreamError(HealthFeedException):
    """Raised when a collaborator (database, object store) fails."""
    status_code = 502
    error_code = "upstream_error"

    def __init__(self, message: str = "Upstream service failed", details: Optional[str] = None):
        super().__init__(message, details=details)


class StorageError(UpstreamError):
    """Raised when relaying a file to object storage fails."""
    status_code = 502
    error_code = "storage_error"

    def __init__(self, message: str = "Could not upload the file", details: Optional[str] = None):
        super().__init__(message, details=details)


class DatabaseError(UpstreamError):
    """Raised when database operations fail."""
    status_code = 500
    error_code = "database_error"

    def __init__(self, message: str = "Database operation failed", details: Optional[str] = None):
        super().__init__(message, details=details)
