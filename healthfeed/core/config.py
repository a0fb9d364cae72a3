"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Secrets (session secret, AWS credentials) never live in the code base;
the only hardcoded secret is the insecure development fallback for
SESSION_SECRET, and a warning is logged whenever it is used outside
development.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent.parent
PACKAGE_ROOT = Path(__file__).parent.parent

# Load .env file from project root
# This must happen before accessing os.environ
load_dotenv(PROJECT_ROOT / ".env")

INSECURE_SESSION_SECRET = "I'm always angry."

FOURTEEN_DAYS_SECONDS = 60 * 60 * 24 * 14
TWO_MIB = 2 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for daily log files
        database_url: SQLAlchemy connection string
        session_secret: Key used to sign the session cookie
        session_max_age_seconds: Rolling lifetime of the session cookie
        upload_dir: Transient staging directory for uploaded files
        max_upload_bytes: Largest accepted upload
        s3_bucket: Object storage bucket receiving article images
        article_page_size: Rows per feed page
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_dir: Path
    host: str
    port: int

    # Database settings
    database_url: str
    auto_create_tables: bool
    seed_demo_accounts: bool
    demo_doctor_email: str
    demo_user_email: str

    # Session settings
    session_secret: str
    session_cookie: str
    session_max_age_seconds: int

    # Upload / object storage settings
    upload_dir: Path
    max_upload_bytes: int
    s3_bucket: str
    s3_region: str
    s3_public_base_url: str

    # Feed settings
    article_page_size: int

    # Client bundle (SPA fallback)
    client_public_dir: Path
    client_index_file: Path

    # HTTP settings
    cors_origins: List[str]
    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"

    def uses_insecure_secret(self) -> bool:
        """True when the session cookie is signed with the built-in fallback."""
        return self.session_secret == INSECURE_SESSION_SECRET

    def public_url_for(self, filename: str) -> str:
        """Public URL of an object relayed to the configured bucket."""
        return f"{self.s3_public_base_url.rstrip('/')}/{self.s3_bucket}/{filename}"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).lower() == "true"


def _normalize_database_url(database_url: str) -> str:
    """Ensure SQLAlchemy gets a dialect name it knows."""
    # Heroku-style URLs still use the old postgres:// scheme
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("mysql://"):
        database_url = database_url.replace("mysql://", "mysql+pymysql://", 1)
    return database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once at startup; lru_cache avoids re-parsing
    the environment on every access and guarantees a single instance.
    Tests that change the environment call get_settings.cache_clear().

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    database_url = _normalize_database_url(
        _get_env("DATABASE_URL", f"sqlite:///{PROJECT_ROOT / 'healthfeed.db'}")
    )

    cors_origins = [
        origin.strip()
        for origin in _get_env("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "HealthFeed"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        log_dir=Path(_get_env("LOG_DIR", str(PROJECT_ROOT / "logs"))),
        host=_get_env("HOST", "0.0.0.0"),
        port=int(_get_env("PORT", "3001")),

        # Database
        database_url=database_url,
        auto_create_tables=_get_bool("AUTO_CREATE_TABLES", "true"),
        seed_demo_accounts=_get_bool("SEED_DEMO_ACCOUNTS", "true"),
        demo_doctor_email=_get_env("DEMO_DOCTOR_EMAIL", "doctor@healthfeed.local"),
        demo_user_email=_get_env("DEMO_USER_EMAIL", "user@healthfeed.local"),

        # Session
        session_secret=_get_env("SESSION_SECRET", INSECURE_SESSION_SECRET),
        session_cookie=_get_env("SESSION_COOKIE", "session"),
        session_max_age_seconds=int(
            _get_env("SESSION_MAX_AGE_SECONDS", str(FOURTEEN_DAYS_SECONDS))
        ),

        # Uploads / S3
        upload_dir=Path(_get_env("UPLOAD_DIR", str(PACKAGE_ROOT / "uploads"))),
        max_upload_bytes=int(_get_env("MAX_UPLOAD_BYTES", str(TWO_MIB))),
        s3_bucket=_get_env("S3_BUCKET", "buckethealthformusic"),
        s3_region=_get_env("S3_REGION", "eu-west-1"),
        s3_public_base_url=_get_env("S3_PUBLIC_BASE_URL", "https://s3.amazonaws.com"),

        # Feed
        article_page_size=int(_get_env("ARTICLE_PAGE_SIZE", "6")),

        # Client bundle
        client_public_dir=Path(
            _get_env("CLIENT_PUBLIC_DIR", str(PROJECT_ROOT / "client" / "public"))
        ),
        client_index_file=Path(
            _get_env("CLIENT_INDEX_FILE", str(PROJECT_ROOT / "client" / "index.html"))
        ),

        # HTTP
        cors_origins=cors_origins,
        enable_audit_logging=_get_bool("ENABLE_AUDIT_LOGGING", "true"),
    )
