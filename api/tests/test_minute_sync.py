"""Tests for the periodic live-minute sync task."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from app.tasks.minute_sync import sync_live_match_minutes, sync_minutes

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


class _FakeScalarResult:
    def __init__(self, items: list[SimpleNamespace]) -> None:
        self._items = items

    def all(self) -> list[SimpleNamespace]:
        return self._items


class _FakeResult:
    def __init__(self, items: list[SimpleNamespace]) -> None:
        self._items = items

    def scalars(self) -> _FakeScalarResult:
        return _FakeScalarResult(self._items)


class _FakeSession:
    def __init__(self, matches: list[SimpleNamespace]) -> None:
        self._matches = matches
        self.flushed = 0

    async def execute(self, statement: object) -> _FakeResult:
        return _FakeResult(self._matches)

    async def flush(self) -> None:
        self.flushed += 1


def _match(status: str, minute: int | None, **timestamps) -> SimpleNamespace:
    return SimpleNamespace(
        status=status,
        minute=minute,
        match_started_at=timestamps.get("match_started_at"),
        second_half_started_at=timestamps.get("second_half_started_at"),
        extra_time_started_at=timestamps.get("extra_time_started_at"),
        updated_at=None,
    )


@pytest.mark.asyncio
async def test_updates_lagging_minutes() -> None:
    lagging = _match("live", 10, match_started_at=NOW - timedelta(minutes=23))
    current = _match("second_half", 60, second_half_started_at=NOW - timedelta(minutes=15))
    session = _FakeSession([lagging, current])

    result = await sync_minutes(session, NOW)

    assert result == {"checked": 2, "updated": 1}
    assert lagging.minute == 23
    assert lagging.updated_at == NOW
    assert current.updated_at is None
    assert session.flushed == 1


@pytest.mark.asyncio
async def test_nothing_to_update_skips_flush() -> None:
    session = _FakeSession([_match("live", 0)])

    result = await sync_minutes(session, NOW)

    assert result == {"checked": 1, "updated": 0}
    assert session.flushed == 0


@pytest.mark.asyncio
async def test_clock_skew_is_not_written() -> None:
    future = _match("live", 0, match_started_at=NOW + timedelta(minutes=2))
    session = _FakeSession([future])

    result = await sync_minutes(session, NOW)

    assert result["updated"] == 0
    assert future.minute == 0


@pytest.mark.asyncio
async def test_logs_summary() -> None:
    with patch("app.tasks.minute_sync.logger") as mock_logger:
        await sync_minutes(_FakeSession([]), NOW)

    mock_logger.info.assert_called_once_with(
        "Live match minutes synced", extra={"checked": 0, "updated": 0}
    )


def test_task_runs_sync_and_disposes_engine() -> None:
    session = _FakeSession([_match("live", 1, match_started_at=NOW - timedelta(minutes=5))])

    class _SessionContext:
        async def __aenter__(self) -> _FakeSession:
            return session

        async def __aexit__(self, *exc_info: object) -> None:
            return None

    with (
        patch("app.tasks.minute_sync.get_async_session", return_value=_SessionContext()),
        patch("app.tasks.minute_sync.close_db", new_callable=AsyncMock) as mock_close,
        patch("app.tasks.minute_sync.now_utc", return_value=NOW),
    ):
        result = sync_live_match_minutes.run()

    assert result == {"checked": 1, "updated": 1}
    mock_close.assert_awaited_once()


def test_task_is_registered_on_beat_schedule() -> None:
    from app.celery_app import celery_app

    entry = celery_app.conf.beat_schedule["sync-live-match-minutes"]
    assert entry["task"] == sync_live_match_minutes.name
