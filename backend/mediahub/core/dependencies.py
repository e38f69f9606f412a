"""Reusable dependencies for FastAPI routes, including the authorization gate."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.config import Settings
from mediahub.core.errors import Forbidden, Unauthenticated
from mediahub.core.security import SessionSigner
from mediahub.db.session import Database
from mediahub.models.user import User
from mediahub.services.auth import AuthService
from mediahub.services.sessions import SessionManager

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_session_signer(request: Request) -> SessionSigner:
    return request.app.state.signer


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


def get_auth_service(
    session: AsyncSession = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> AuthService:
    return AuthService(session, sessions)


def get_session_id(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    signer: SessionSigner = Depends(get_session_signer),
) -> str | None:
    """Return the session id from a validly signed cookie, or None."""

    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    try:
        return signer.loads(token, max_age=settings.session_ttl_seconds)
    except ValueError:
        logger.debug("Ignoring session cookie with a bad signature")
        return None


async def require_authenticated(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    session_id: str | None = Depends(get_session_id),
) -> User:
    user = await auth.current_user(session_id)
    if user is None:
        raise Unauthenticated()
    request.state.principal = user
    return user


async def require_admin(current_user: User = Depends(require_authenticated)) -> User:
    if not current_user.is_admin:
        raise Forbidden()
    return current_user
