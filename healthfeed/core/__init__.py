"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy with HTTP status codes
- session.py        : Cookie session identity
- validators.py     : Article submission validation
- audit.py          : Request logging and security headers
"""
from healthfeed.core.config import get_settings, Settings
from healthfeed.core.logging_config import setup_logging, get_logger
from healthfeed.core.session import SessionUser

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "SessionUser",
]
