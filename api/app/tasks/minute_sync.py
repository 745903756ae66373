"""Periodic persistence of the derived live minute.

The on-screen clock is always recomputed from phase-start timestamps; this
task only writes that value back to `matches.minute` so consumers reading the
column directly (feeds, exports, the stored-minute fallback) stay close to
what viewers see.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..celery_app import celery_app
from ..db import close_db, get_async_session
from ..db.sports import Match
from ..services.match_clock import RUNNING_STATUSES, compute_minute
from ..utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


async def sync_minutes(session: AsyncSession, now: datetime) -> dict[str, int]:
    """Write the computed minute onto every running match whose column lags.

    Returns:
        {"checked": running matches seen, "updated": rows changed}
    """
    result = await session.execute(
        select(Match).where(Match.status.in_(sorted(RUNNING_STATUSES)))
    )
    matches = result.scalars().all()

    updated = 0
    for match in matches:
        minute = compute_minute(match, now)
        if minute < 0 or minute == match.minute:
            continue
        match.minute = minute
        match.updated_at = now
        updated += 1

    if updated:
        await session.flush()

    logger.info(
        "Live match minutes synced",
        extra={"checked": len(matches), "updated": updated},
    )
    return {"checked": len(matches), "updated": updated}


async def _sync_live_match_minutes_async() -> dict[str, int]:
    try:
        async with get_async_session() as session:
            return await sync_minutes(session, now_utc())
    finally:
        # Each asyncio.run gets a new loop; pooled connections from the old one are unusable.
        await close_db()


@celery_app.task(name="app.tasks.minute_sync.sync_live_match_minutes")
def sync_live_match_minutes() -> dict[str, Any]:
    """Beat-scheduled entry point."""
    return asyncio.run(_sync_live_match_minutes_async())
