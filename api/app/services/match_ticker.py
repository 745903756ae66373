"""Per-match repeating clock timers.

LiveMinuteTicker owns at most one asyncio task per match id. Registering a
match emits its minute immediately; while the status is running the task
re-emits every `interval_seconds`. The task is cancelled when the match
leaves a running status, when it is unregistered, and when the ticker is
closed, so a torn-down view never leaves a timer behind.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Awaitable, Callable, Hashable, NamedTuple

from ..utils.datetime_utils import now_utc, parse_timestamp
from .match_clock import compute_minute, is_running

logger = logging.getLogger(__name__)

TickCallback = Callable[[Hashable, int], "Awaitable[None] | None"]


class ClockState(NamedTuple):
    """The fields the clock depends on, frozen at registration time."""

    status: str
    minute: int | None
    match_started_at: datetime | None
    second_half_started_at: datetime | None
    extra_time_started_at: datetime | None

    @classmethod
    def from_match(cls, match: Any) -> "ClockState":
        get = match.get if isinstance(match, Mapping) else lambda name: getattr(match, name, None)
        status = get("status")
        return cls(
            status=str(getattr(status, "value", status) or ""),
            minute=get("minute"),
            match_started_at=parse_timestamp(get("match_started_at")),
            second_half_started_at=parse_timestamp(get("second_half_started_at")),
            extra_time_started_at=parse_timestamp(get("extra_time_started_at")),
        )


class LiveMinuteTicker:
    """Cooperative 1-second (by default) minute recomputation for live matches."""

    def __init__(
        self,
        on_tick: TickCallback,
        interval_seconds: float = 1.0,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._on_tick = on_tick
        self._interval = interval_seconds
        self._clock = clock
        self._tasks: dict[Hashable, asyncio.Task] = {}
        self._states: dict[Hashable, ClockState] = {}
        self._closed = False

    async def __aenter__(self) -> "LiveMinuteTicker":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def active_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def is_ticking(self, match_id: Hashable) -> bool:
        task = self._tasks.get(match_id)
        return task is not None and not task.done()

    async def sync(self, match_id: Hashable, match: Any) -> int:
        """Register or refresh a match; returns the minute emitted right away.

        A new timer is started only if the match is running and its clock
        fields changed (or no timer exists); otherwise the current one stays.
        """
        if self._closed:
            raise RuntimeError("LiveMinuteTicker is closed")

        state = match if isinstance(match, ClockState) else ClockState.from_match(match)
        minute = compute_minute(state, self._clock())
        await self._emit(match_id, minute)

        if not is_running(state.status):
            self.cancel(match_id)
            return minute

        if self.is_ticking(match_id) and self._states.get(match_id) == state:
            return minute

        self.cancel(match_id)
        self._states[match_id] = state
        self._tasks[match_id] = asyncio.create_task(
            self._run(match_id, state), name=f"match-clock-{match_id}"
        )
        logger.debug("Match clock started", extra={"match_id": match_id, "status": state.status})
        return minute

    def cancel(self, match_id: Hashable) -> bool:
        """Stop the timer for one match. Returns False if none was active."""
        self._states.pop(match_id, None)
        task = self._tasks.pop(match_id, None)
        if task is None:
            return False
        task.cancel()
        logger.debug("Match clock cancelled", extra={"match_id": match_id})
        return True

    async def close(self) -> None:
        """Cancel every timer and wait for them to finish."""
        self._closed = True
        tasks = list(self._tasks.values())
        self._tasks.clear()
        self._states.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(self, match_id: Hashable, state: ClockState) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self._emit(match_id, compute_minute(state, self._clock()))

    async def _emit(self, match_id: Hashable, minute: int) -> None:
        try:
            result = self._on_tick(match_id, minute)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Match clock tick callback failed", extra={"match_id": match_id})
