"""
Gamers Challenge Backend
FastAPI application factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration

from gamers_challenge.api.api import api_router
from gamers_challenge.core.config import Settings, settings as default_settings
from gamers_challenge.core.database import Database
from gamers_challenge.core.exceptions import register_exception_handlers
from gamers_challenge.core.logging import setup_logging
from gamers_challenge.core.security import SecurityUtils
from gamers_challenge.middleware import (
    BodySizeLimitMiddleware,
    LoggingMiddleware,
    RequestIDMiddleware,
)
from gamers_challenge.services.uploads import UploadStorage

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings) -> None:
    """Initialize Sentry if a DSN is provided"""
    if not settings.SENTRY_DSN:
        return
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[FastApiIntegration(transaction_style="endpoint")],
        traces_sample_rate=1.0 if settings.DEBUG else 0.1,
        environment=settings.ENVIRONMENT,
    )
    logger.info("Sentry initialized")


def create_app(
    settings: Optional[Settings] = None, database: Optional[Database] = None
) -> FastAPI:
    """
    Build the application

    Args:
        settings: Application settings, defaults to the environment-loaded ones
        database: Database gateway, defaults to one built from MONGODB_URI

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    if database is None:
        database = Database(settings.MONGODB_URI, settings.MONGODB_DB, settings.MONGODB_TIMEOUT_MS)

    uploads = UploadStorage.from_settings(settings)
    uploads.ensure_directory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        if "SECRET_KEY" not in settings.model_fields_set:
            logger.warning(
                "SECRET_KEY is not set, using a random per-process key; "
                "tokens will not survive a restart or work across workers"
            )

        await database.connect()
        if not database.is_connected:
            logger.error("Database unavailable, store-backed requests will fail")

        yield

        logger.info("Shutting down application")
        database.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.security = SecurityUtils.from_settings(settings)
    app.state.uploads = uploads

    # Last added runs first
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.MAX_UPLOAD_SIZE)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR),
        name="uploads",
    )
    app.include_router(api_router)

    return app


def build_default_app() -> FastAPI:
    """Application built from environment settings"""
    setup_logging(default_settings)
    init_sentry(default_settings)
    return create_app(default_settings)


app = build_default_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gamers_challenge.main:app",
        host="0.0.0.0",
        port=3000,
        reload=default_settings.DEBUG,
        log_level="debug" if default_settings.DEBUG else "info",
    )
