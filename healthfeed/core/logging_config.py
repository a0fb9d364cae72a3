"""
Centralized logging configuration.

Every module logs through get_logger(__name__). setup_logging() is
called once from the application entry point and attaches two handlers
to the root logger:

- stdout, at the configured LOG_LEVEL
- LOG_DIR/healthfeed.log at DEBUG, rotated at midnight (7 days kept)
"""
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "healthfeed.log"
BACKUP_DAYS = 7

# Third-party loggers that are far too chatty at DEBUG level
NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "s3transfer",
    "urllib3",
    "httpx",
    "httpcore",
    "multipart",
)

_logging_configured = False


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the root logger.

    Calling it again is a no-op, so importing the app twice (tests,
    uvicorn reload) does not duplicate handlers.

    Args:
        log_level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the log file; defaults to ./logs

    Returns:
        The root logger
    """
    global _logging_configured

    root_logger = logging.getLogger()
    if _logging_configured:
        return root_logger

    log_dir = log_dir or Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    file_handler = TimedRotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        when="midnight",
        backupCount=BACKUP_DAYS,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True
    root_logger.debug(f"Logging configured: console={log_level} file={log_dir / LOG_FILE_NAME}")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module; pass __name__.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Publishing article")
        2024-01-15 10:30:45 | INFO     | healthfeed.services.article_service:42 | Publishing article
    """
    return logging.getLogger(name)
