"""Tests for public match endpoints, the clock stream, and CMS match control."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock, patch
import json
import unittest

from fastapi.testclient import TestClient

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.append(str(REPO_ROOT))

from app.db import get_db
from app.services.match_ticker import ClockState
from api.main import app


class _FakeScalarResult:
    def __init__(self, items: list[SimpleNamespace]) -> None:
        self._items = items

    def all(self) -> list[SimpleNamespace]:
        return self._items


class _FakeResult:
    def __init__(self, scalars: list[SimpleNamespace] | None = None) -> None:
        self._scalars = scalars or []

    def scalars(self) -> _FakeScalarResult:
        return _FakeScalarResult(self._scalars)


class _FakeSession:
    def __init__(
        self,
        execute_results: list[_FakeResult] | None = None,
        get_result: SimpleNamespace | None = None,
    ) -> None:
        self._execute_results = execute_results or []
        self._get_result = get_result
        self.flushed = 0

    async def execute(self, statement: object) -> _FakeResult:
        return self._execute_results.pop(0)

    async def get(self, model: object, match_id: int, options: object = None) -> SimpleNamespace | None:
        return self._get_result

    async def flush(self) -> None:
        self.flushed += 1


def _build_match(status: str = "live", minute: int | None = None, **overrides) -> SimpleNamespace:
    now = datetime.now(timezone.utc)
    values = {
        "id": 5,
        "status": status,
        "date": now - timedelta(hours=1),
        "score_home": 1,
        "score_away": 0,
        "penalty_score_home": None,
        "penalty_score_away": None,
        "minute": minute,
        "match_started_at": None,
        "first_half_ended_at": None,
        "second_half_started_at": None,
        "second_half_ended_at": None,
        "extra_time_started_at": None,
        "extra_time_ended_at": None,
        "penalties_started_at": None,
        "match_ended_at": None,
        "updated_at": now,
        "home_team": SimpleNamespace(id=1, slug="saint-george", name_en="Saint George", name_am=None, logo_url=None),
        "away_team": SimpleNamespace(id=2, slug="fasil-kenema", name_en="Fasil Kenema", name_am=None, logo_url=None),
        "league": SimpleNamespace(id=3, slug="premier-league", name_en="Premier League", name_am=None, logo_url=None),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _EndpointTestCase(unittest.TestCase):
    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _override_db(self, session: _FakeSession) -> None:
        async def override_get_db() -> AsyncGenerator[_FakeSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db


class TestPublicMatchEndpoints(_EndpointTestCase):
    def test_live_matches_include_calculated_minute(self) -> None:
        started = datetime.now(timezone.utc) - timedelta(minutes=12, seconds=30)
        match = _build_match("live", match_started_at=started)
        self._override_db(_FakeSession(execute_results=[_FakeResult(scalars=[match])]))
        client = TestClient(app)

        response = client.get("/api/public/matches/live")
        self.assertEqual(response.status_code, 200)
        [payload] = response.json()
        self.assertEqual(payload["id"], 5)
        self.assertIn(payload["calculatedMinute"], (12, 13))
        self.assertTrue(payload["isRunning"])
        self.assertEqual(payload["phase"], "first_half")
        self.assertEqual(payload["homeTeam"]["nameEn"], "Saint George")
        self.assertEqual(payload["league"]["slug"], "premier-league")

    def test_half_time_match_uses_stored_minute(self) -> None:
        match = _build_match("half_time", minute=45)
        self._override_db(_FakeSession(execute_results=[_FakeResult(scalars=[match])]))
        client = TestClient(app)

        [payload] = client.get("/api/public/matches/live").json()
        self.assertEqual(payload["calculatedMinute"], 45)
        self.assertFalse(payload["isRunning"])
        self.assertEqual(payload["displayMinute"], "45'")

    def test_get_match(self) -> None:
        started = datetime.now(timezone.utc) - timedelta(minutes=20)
        match = _build_match("second_half", second_half_started_at=started)
        self._override_db(_FakeSession(get_result=match))
        client = TestClient(app)

        response = client.get("/api/public/matches/5")
        self.assertEqual(response.status_code, 200)
        self.assertIn(response.json()["calculatedMinute"], (65, 66))

    def test_unknown_match_returns_404(self) -> None:
        self._override_db(_FakeSession(get_result=None))
        client = TestClient(app)

        response = client.get("/api/public/matches/404")
        self.assertEqual(response.status_code, 404)


class TestClockStream(_EndpointTestCase):
    def test_non_running_match_gets_single_event(self) -> None:
        self._override_db(_FakeSession(get_result=_build_match("half_time", minute=45)))
        client = TestClient(app)

        response = client.get("/api/public/matches/5/clock/stream")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/event-stream"))

        frames = [line for line in response.text.split("\n\n") if line.strip()]
        self.assertEqual(len(frames), 1)
        event = json.loads(frames[0].removeprefix("data: "))
        self.assertEqual(
            event, {"matchId": 5, "status": "half_time", "minute": 45, "isRunning": False}
        )

    def test_running_match_ticks_until_refresh_ends_it(self) -> None:
        started = datetime.now(timezone.utc) - timedelta(seconds=125)
        self._override_db(_FakeSession(get_result=_build_match("live", match_started_at=started)))
        finished = ClockState(
            status="completed",
            minute=90,
            match_started_at=started,
            second_half_started_at=None,
            extra_time_started_at=None,
        )
        client = TestClient(app)

        with (
            patch("app.routers.matches.public.settings") as mock_settings,
            patch(
                "app.routers.matches.public._load_clock_state",
                new_callable=AsyncMock,
                return_value=finished,
            ) as mock_load,
        ):
            mock_settings.clock_tick_seconds = 0.01
            mock_settings.clock_refresh_seconds = 0.05
            response = client.get("/api/public/matches/5/clock/stream")

        self.assertEqual(response.status_code, 200)
        frames = [
            json.loads(frame.removeprefix("data: "))
            for frame in response.text.split("\n\n")
            if frame.strip()
        ]
        self.assertGreaterEqual(len(frames), 3)
        self.assertEqual(
            frames[0], {"matchId": 5, "status": "live", "minute": 2, "isRunning": True}
        )
        self.assertTrue(all(frame["status"] == "live" for frame in frames[:-1]))
        self.assertEqual(
            frames[-1], {"matchId": 5, "status": "completed", "minute": 90, "isRunning": False}
        )
        mock_load.assert_awaited_once_with(5)

    def test_stream_unknown_match_returns_404(self) -> None:
        self._override_db(_FakeSession(get_result=None))
        client = TestClient(app)

        response = client.get("/api/public/matches/9/clock/stream")
        self.assertEqual(response.status_code, 404)


class TestMatchControl(_EndpointTestCase):
    def test_start_action_stamps_kickoff(self) -> None:
        match = _build_match("scheduled", minute=None)
        session = _FakeSession(get_result=match)
        self._override_db(session)
        client = TestClient(app)

        response = client.patch("/api/cms/matches/5/control", json={"action": "start"})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["status"], "live")
        self.assertEqual(payload["calculatedMinute"], 0)
        self.assertIsNotNone(payload["matchStartedAt"])
        self.assertIsNotNone(match.match_started_at)
        self.assertEqual(session.flushed, 1)

    def test_pause_freezes_computed_minute(self) -> None:
        started = datetime.now(timezone.utc) - timedelta(minutes=30, seconds=10)
        match = _build_match("live", minute=0, match_started_at=started)
        self._override_db(_FakeSession(get_result=match))
        client = TestClient(app)

        response = client.patch("/api/cms/matches/5/control", json={"action": "pause"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(match.status, "paused")
        self.assertIn(match.minute, (30, 31))

    def test_explicit_fields_override_action(self) -> None:
        match = _build_match("live", minute=10)
        self._override_db(_FakeSession(get_result=match))
        client = TestClient(app)

        response = client.patch(
            "/api/cms/matches/5/control",
            json={"action": "half_time", "minute": 47, "scoreHome": 2},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(match.status, "half_time")
        self.assertEqual(match.minute, 47)
        self.assertEqual(match.score_home, 2)
        self.assertIsNotNone(match.first_half_ended_at)

    def test_status_enum_is_stored_as_string(self) -> None:
        match = _build_match("live", minute=10)
        self._override_db(_FakeSession(get_result=match))
        client = TestClient(app)

        response = client.patch("/api/cms/matches/5/control", json={"status": "penalties"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(match.status, "penalties")

    def test_empty_request_returns_400(self) -> None:
        self._override_db(_FakeSession(get_result=_build_match()))
        client = TestClient(app)

        response = client.patch("/api/cms/matches/5/control", json={})
        self.assertEqual(response.status_code, 400)

    def test_unknown_action_returns_422(self) -> None:
        self._override_db(_FakeSession(get_result=_build_match()))
        client = TestClient(app)

        response = client.patch("/api/cms/matches/5/control", json={"action": "rewind"})
        self.assertEqual(response.status_code, 422)

    def test_unknown_match_returns_404(self) -> None:
        self._override_db(_FakeSession(get_result=None))
        client = TestClient(app)

        response = client.patch("/api/cms/matches/5/control", json={"action": "start"})
        self.assertEqual(response.status_code, 404)
