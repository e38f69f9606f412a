"""Authentication workflows: registration, login, admin login and logout."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.errors import AccessDenied, DuplicateEmail, DuplicateUsername, InvalidCredentials
from mediahub.core.security import PasswordHasher, dummy_password_hash
from mediahub.models.user import User
from mediahub.schemas.user import UserCreate, UserRead
from mediahub.services import users as user_service
from mediahub.services.sessions import SessionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """A sanitized principal together with the session issued for it."""

    user: UserRead
    session_id: str


async def hash_password(password: str) -> str:
    return await run_in_threadpool(PasswordHasher.hash, password)


async def verify_password(password: str, hashed: str) -> bool:
    return await run_in_threadpool(PasswordHasher.verify, password, hashed)


class AuthService:
    """Bind verified credentials to sessions for one unit of work."""

    def __init__(self, session: AsyncSession, sessions: SessionManager) -> None:
        self.session = session
        self.sessions = sessions

    async def register(self, payload: UserCreate) -> AuthResult:
        if await user_service.get_user_by_username(self.session, payload.username):
            raise DuplicateUsername()
        if await user_service.get_user_by_email(self.session, payload.email):
            raise DuplicateEmail()

        password_hash = await hash_password(payload.password)
        # Unique constraints catch a concurrent registration that passed the checks above.
        user = await user_service.create_user(
            self.session,
            username=payload.username,
            email=payload.email,
            password_hash=password_hash,
            first_name=payload.first_name,
            last_name=payload.last_name,
            is_admin=False,
        )
        session_id = await self.sessions.create(self.session, user.id)
        await self.session.commit()
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return AuthResult(user=UserRead.model_validate(user), session_id=session_id)

    async def _verify_credentials(self, username: str, password: str) -> User:
        user = await user_service.get_user_by_username(self.session, username)
        if user is None:
            await verify_password(password, await run_in_threadpool(dummy_password_hash))
            logger.info("Failed login for unknown username %s", username)
            raise InvalidCredentials()
        if not await verify_password(password, user.password_hash):
            logger.info("Failed login for user %s", username)
            raise InvalidCredentials()
        return user

    async def login(self, username: str, password: str) -> AuthResult:
        user = await self._verify_credentials(username, password)
        session_id = await self.sessions.create(self.session, user.id)
        await self.session.commit()
        return AuthResult(user=UserRead.model_validate(user), session_id=session_id)

    async def admin_login(self, username: str, password: str) -> AuthResult:
        user = await self._verify_credentials(username, password)
        if not user.is_admin:
            logger.warning("Non-admin user %s attempted admin login", username)
            raise AccessDenied()
        session_id = await self.sessions.create(self.session, user.id)
        await self.session.commit()
        return AuthResult(user=UserRead.model_validate(user), session_id=session_id)

    async def logout(self, session_id: str | None) -> None:
        if session_id:
            await self.sessions.destroy(self.session, session_id)

    async def current_user(self, session_id: str | None) -> User | None:
        if not session_id:
            return None
        user_id = await self.sessions.resolve(self.session, session_id)
        if user_id is None:
            return None
        return await user_service.get_user(self.session, user_id)

    async def current_principal(self, session_id: str | None) -> UserRead | None:
        user = await self.current_user(session_id)
        return UserRead.model_validate(user) if user else None
