"""
API module - FastAPI routes and HTTP handling.

This module handles:
- Session decoding and auth guards
- Request validation and parsing
- Response formatting
- Route definitions
"""
