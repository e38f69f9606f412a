"""User service functions: the credential store backing authentication."""
from __future__ import annotations

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.errors import ConflictError, DuplicateEmail, DuplicateUsername
from mediahub.core.security import PasswordHasher
from mediahub.models.user import User

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"email", "first_name", "last_name", "is_admin", "password_hash"})


async def get_user(session: AsyncSession, user_id: int) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def _conflict_for(session: AsyncSession, username: str | None, email: str | None) -> ConflictError:
    if username is not None and await get_user_by_username(session, username):
        return DuplicateUsername()
    if email is not None and await get_user_by_email(session, email):
        return DuplicateEmail()
    return ConflictError()


async def create_user(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    password_hash: str,
    first_name: str | None = None,
    last_name: str | None = None,
    is_admin: bool = False,
) -> User:
    """Insert a user, relying on the table's unique constraints for username and email.

    The session is rolled back when the insert conflicts.
    """

    user = User(
        username=username,
        email=email.lower(),
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        is_admin=is_admin,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        conflict = await _conflict_for(session, username, email.lower())
        logger.info("Rejected user %s: %s", username, conflict.message)
        raise conflict from exc
    return user


async def update_user(session: AsyncSession, user_id: int, changes: dict[str, Any]) -> User | None:
    user = await get_user(session, user_id)
    if not user:
        return None

    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    for field, value in changes.items():
        if field == "email" and value is not None:
            value = value.lower()
        setattr(user, field, value)

    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise await _conflict_for(session, None, changes.get("email")) from exc
    return user


async def delete_user(session: AsyncSession, user_id: int) -> bool:
    user = await get_user(session, user_id)
    if not user:
        return False
    await session.delete(user)
    await session.flush()
    return True


async def ensure_admin_user(session: AsyncSession, username: str, email: str, password: str) -> User | None:
    """Create the initial admin account unless a user with that username exists."""

    if await get_user_by_username(session, username):
        return None
    password_hash = await run_in_threadpool(PasswordHasher.hash, password)
    user = await create_user(session, username=username, email=email, password_hash=password_hash, is_admin=True)
    await session.commit()
    logger.info("Seeded admin user %s", username)
    return user
