"""Periodic eviction of idle dictation sessions"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging

from journal_ai.services.session_cache import SessionCache

logger = logging.getLogger(__name__)

JOB_ID = "stt_session_cleanup"


async def sweep_idle_sessions(cache: SessionCache) -> list:
    """
    Evict dictation sessions idle past their TTL
    Run this every few minutes via scheduler. Must stay a coroutine: the
    cache is only touched from the event loop thread
    """
    try:
        expired = cache.sweep()
        if expired:
            logger.info(f"Evicted {len(expired)} idle STT sessions, {len(cache)} active")
        return expired
    except Exception as e:
        logger.error(f"Session cleanup failed: {str(e)}")
        return []


def schedule_session_cleanup(scheduler: AsyncIOScheduler, cache: SessionCache, interval_seconds: int) -> None:
    """Register the sweep on a scheduler"""
    scheduler.add_job(
        sweep_idle_sessions,
        'interval',
        seconds=interval_seconds,
        args=[cache],
        id=JOB_ID,
        replace_existing=True
    )
