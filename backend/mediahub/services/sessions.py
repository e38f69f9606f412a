"""Server-side session store mapping opaque session ids to user ids."""
from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.models.session import UserSession

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without tzinfo; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _short(session_id: str) -> str:
    return f"{session_id[:6]}…"


class SessionManager:
    """Create, resolve and destroy login sessions.

    A session is active until ``expires_at``; after that it resolves to
    nothing and is deleted the next time it is looked up or swept.
    """

    def __init__(self, ttl: timedelta = DEFAULT_SESSION_TTL, clock: Callable[[], datetime] = _utcnow) -> None:
        self.ttl = ttl
        self._clock = clock

    def now(self) -> datetime:
        return _as_utc(self._clock())

    async def create(self, session: AsyncSession, user_id: int) -> str:
        now = self.now()
        session_id = secrets.token_urlsafe(32)
        session.add(UserSession(id=session_id, user_id=user_id, created_at=now, expires_at=now + self.ttl))
        await session.flush()
        logger.info("Created session %s for user %s", _short(session_id), user_id)
        return session_id

    async def resolve(self, session: AsyncSession, session_id: str) -> int | None:
        record = await session.get(UserSession, session_id)
        if record is None:
            return None
        if _as_utc(record.expires_at) <= self.now():
            await session.delete(record)
            await session.commit()
            logger.debug("Purged expired session %s", _short(session_id))
            return None
        return record.user_id

    async def destroy(self, session: AsyncSession, session_id: str) -> None:
        await session.execute(delete(UserSession).where(UserSession.id == session_id))
        await session.commit()
        logger.info("Destroyed session %s", _short(session_id))

    async def destroy_for_user(self, session: AsyncSession, user_id: int) -> int:
        result = await session.execute(delete(UserSession).where(UserSession.user_id == user_id))
        return result.rowcount or 0

    async def purge_expired(self, session: AsyncSession) -> int:
        result = await session.execute(select(UserSession.id).where(UserSession.expires_at <= self.now()))
        expired = list(result.scalars().all())
        if expired:
            await session.execute(delete(UserSession).where(UserSession.id.in_(expired)))
        await session.commit()
        return len(expired)
