"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from fieldtech.api.router import api_router
from fieldtech.config import Settings, get_settings
from fieldtech.db.engine import Database
from fieldtech.errors import register_exception_handlers
from fieldtech.log import configure_logging
from fieldtech.services.auth import SessionIssuer, TokenIssuer
from fieldtech.services.media_store import MediaStore
from fieldtech.tickets.service import TicketService

logger = logging.getLogger(__name__)


async def init_app_state(app: FastAPI) -> None:
    """Build the database handle and services and hang them on app.state."""
    settings: Settings = app.state.settings
    configure_logging(settings)
    if settings.uses_default_secret:
        logger.warning("Using the built-in JWT secret; set JWT_SECRET before deploying")

    database = Database(settings.database_url)
    await database.create_all()

    Path(settings.media.upload_dir).mkdir(parents=True, exist_ok=True)
    media_store = MediaStore(settings.media.upload_dir, settings.media.url_prefix)
    tokens = TokenIssuer(
        secret=settings.auth.jwt_secret,
        algorithm=settings.auth.jwt_algorithm,
        expires_in=timedelta(hours=settings.auth.token_expiry_hours),
    )

    app.state.database = database
    app.state.media_store = media_store
    app.state.session_issuer = SessionIssuer(database, tokens)
    app.state.ticket_service = TicketService(database, media_store)
    logger.info("%s ready (environment=%s)", settings.app_name, settings.environment)


async def close_app_state(app: FastAPI) -> None:
    database: Database | None = getattr(app.state, "database", None)
    if database is not None:
        await database.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_app_state(app)
    yield
    await close_app_state(app)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Field technician tickets: work logs, media evidence and customer signatures.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app, expose_internal=settings.is_development)

    # API routes
    app.include_router(api_router)

    # Uploaded media, served at the URLs stored on each attachment;
    # init_app_state creates the directory
    app.mount(
        "/" + settings.media.url_prefix.strip("/"),
        StaticFiles(directory=settings.media.upload_dir, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()
