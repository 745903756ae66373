"""Public match endpoints: live list, detail, and the live clock stream."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy import desc, select

from ...config import settings
from ...db import AsyncSession, get_async_session, get_db
from ...db.sports import Match
from ...services.match_clock import DISPLAYABLE_STATUSES, is_running
from ...services.match_ticker import ClockState, LiveMinuteTicker
from ...utils.datetime_utils import now_utc
from .helpers import MATCH_RELATIONS, serialize_match, sse_event
from .schemas import MatchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public/matches", tags=["matches"])


@router.get("/live", response_model=list[MatchResponse])
async def list_live_matches(session: AsyncSession = Depends(get_db)) -> list[MatchResponse]:
    """Matches in play or interrupted (half time, penalties, paused), newest first."""
    stmt = (
        select(Match)
        .where(Match.status.in_(sorted(DISPLAYABLE_STATUSES)))
        .options(*MATCH_RELATIONS)
        .order_by(desc(Match.date))
    )
    result = await session.execute(stmt)
    now = now_utc()
    return [serialize_match(match, now) for match in result.scalars().all()]


@router.get("/{match_id}", response_model=MatchResponse)
async def get_match(match_id: int, session: AsyncSession = Depends(get_db)) -> MatchResponse:
    match = await session.get(Match, match_id, options=list(MATCH_RELATIONS))
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    return serialize_match(match, now_utc())


async def _load_clock_state(match_id: int) -> ClockState | None:
    async with get_async_session() as session:
        match = await session.get(Match, match_id)
        return ClockState.from_match(match) if match is not None else None


async def _clock_events(
    request: Request, match_id: int, state: ClockState
) -> AsyncIterator[str]:
    """Emit the minute every tick until the match stops running or the client leaves."""
    queue: asyncio.Queue[int] = asyncio.Queue()

    async def on_tick(_: object, minute: int) -> None:
        await queue.put(minute)

    tick = settings.clock_tick_seconds
    loop = asyncio.get_running_loop()

    async with LiveMinuteTicker(on_tick, interval_seconds=tick) as ticker:
        await ticker.sync(match_id, state)
        next_refresh = loop.time() + settings.clock_refresh_seconds

        while True:
            try:
                minute = await asyncio.wait_for(queue.get(), timeout=tick * 2)
            except asyncio.TimeoutError:
                minute = None

            if minute is not None:
                yield sse_event(
                    {
                        "matchId": match_id,
                        "status": state.status,
                        "minute": minute,
                        "isRunning": is_running(state.status),
                    }
                )

            if not is_running(state.status) and queue.empty():
                break
            if await request.is_disconnected():
                logger.debug("Clock stream client disconnected", extra={"match_id": match_id})
                break

            if loop.time() >= next_refresh:
                refreshed = await _load_clock_state(match_id)
                if refreshed is None:
                    break
                state = refreshed
                # Pending ticks belong to the previous state.
                while not queue.empty():
                    queue.get_nowait()
                await ticker.sync(match_id, state)
                next_refresh = loop.time() + settings.clock_refresh_seconds


@router.get("/{match_id}/clock/stream")
async def stream_match_clock(
    match_id: int,
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> StreamingResponse:
    """Server-Sent Events feed of the live minute for one match.

    Non-running matches get a single event with the stored minute and the
    stream closes.
    """
    match = await session.get(Match, match_id)
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")

    return StreamingResponse(
        _clock_events(request, match_id, ClockState.from_match(match)),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
