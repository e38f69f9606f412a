"""Background scheduler for sweeping expired sessions."""
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from mediahub.db.session import Database
from mediahub.services.sessions import SessionManager

logger = logging.getLogger(__name__)

PRUNE_JOB_ID = "prune-expired-sessions"


async def prune_expired_sessions(database: Database, sessions: SessionManager) -> int:
    """Delete every session whose expiry has passed."""
    async with database.session() as session:
        removed = await sessions.purge_expired(session)
    if removed:
        logger.info("Pruned %d expired session(s)", removed)
    return removed


def build_scheduler(database: Database, sessions: SessionManager, interval_seconds: int) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()
    trigger = IntervalTrigger(seconds=interval_seconds)
    scheduler.add_job(
        prune_expired_sessions,
        trigger=trigger,
        id=PRUNE_JOB_ID,
        args=[database, sessions],
        replace_existing=True,
    )
    logger.info("Scheduled session prune job every %s seconds", trigger.interval.total_seconds())
    return scheduler
