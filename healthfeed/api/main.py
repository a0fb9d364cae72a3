"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Middleware configuration (CORS, compression, sessions, audit, security)
3. Exception handlers
4. Router registration (SPA fallback last)
5. Startup/shutdown events

Run with: uvicorn healthfeed.api.main:app --reload
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from healthfeed import __version__
from healthfeed.core.config import get_settings
from healthfeed.core.logging_config import setup_logging, get_logger
from healthfeed.core.exceptions import HealthFeedException
from healthfeed.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from healthfeed.api.routes import (
    accounts_router,
    articles_router,
    doctors_router,
    health_router,
    spa_router,
)


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, settings.log_dir)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: create tables, seed demo accounts, prepare the upload directory
    - Shutdown: close database connections
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"Object storage bucket: {settings.s3_bucket}")
    logger.info(f"Upload cap: {settings.max_upload_bytes} bytes")

    if settings.uses_insecure_secret() and not settings.is_development():
        logger.warning("SESSION_SECRET is not set; session cookies are signed with the built-in fallback")

    settings.upload_dir.mkdir(parents=True, exist_ok=True)

    if settings.auto_create_tables:
        from healthfeed.database import init_tables
        init_tables()

    if settings.seed_demo_accounts:
        from healthfeed.database import seed_demo_accounts
        seed_demo_accounts()

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    from healthfeed.database import reset_database
    reset_database()


app = FastAPI(
    title="HealthFeed API",
    description="""
    Articles written by doctors, served as JSON to the HealthFeed client.

    ## Features

    - **Cookie sessions**: signed, rolling 14-day session cookie
    - **Article feeds**: newest first, paginated by smallest seen id
    - **Publishing**: multipart upload, image relayed to S3
    - **Doctor profiles**: with an ownProfile flag for the viewer
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration (last added runs first)
# ============================================================

app.add_middleware(SecurityHeadersMiddleware)

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
    https_only=settings.is_production(),
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning(f"CORS configured for development: {settings.cors_origins}")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(HealthFeedException)
async def healthfeed_exception_handler(request: Request, exc: HealthFeedException):
    """Handle all custom exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error_code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Every request gets an answer; detailed error information is only
    included in development mode.
    """
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred",
            "code": "internal_error",
            "details": str(exc) if settings.is_development() else None,
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(articles_router)
app.include_router(doctors_router)
app.include_router(spa_router)  # catch-all, keep last


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "healthfeed.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development()
    )
