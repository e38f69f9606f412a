"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediahub.api import api_router
from mediahub.core.config import Settings, get_settings
from mediahub.core.errors import register_error_handlers
from mediahub.core.logging import configure_logging
from mediahub.core.security import SessionSigner
from mediahub.db.session import Database
from mediahub.services.scheduler import build_scheduler
from mediahub.services.sessions import SessionManager
from mediahub.services.users import ensure_admin_user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    await database.create_all()
    if settings.admin_password:
        async with database.session() as session:
            await ensure_admin_user(session, settings.admin_username, settings.admin_email, settings.admin_password)

    scheduler = None
    if settings.session_prune_enabled:
        scheduler = build_scheduler(database, app.state.sessions, settings.session_prune_interval_seconds)
        scheduler.start()
        logger.info("Scheduler started")

    try:
        yield
    finally:
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
        await database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and the resources it owns for its lifetime."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = Database(settings.database_url)
    app.state.sessions = SessionManager(ttl=timedelta(minutes=settings.session_ttl_minutes))
    app.state.signer = SessionSigner(settings.secret_key)

    if settings.is_production and settings.secret_key == Settings.model_fields["secret_key"].default:
        logger.warning("MEDIAHUB_SECRET_KEY is unset; session cookies are signed with the default key")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(api_router)
    return app


def run() -> None:
    import uvicorn

    uvicorn.run("mediahub.main:create_app", factory=True, host="0.0.0.0", port=8000, log_level="info")
