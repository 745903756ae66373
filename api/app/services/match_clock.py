"""Live match clock derivation.

Pure functions: the displayed minute is recomputed from the phase-start
timestamps stored on the match, so the clock survives page reloads and
server restarts. The persisted `minute` column is only the fallback of
record, used whenever the clock is not running or the active phase has no
start timestamp.

Inputs are duck-typed: an ORM row, any attribute object, or a JSON mapping
with `status`, `minute`, `match_started_at`, `second_half_started_at` and
`extra_time_started_at`. Timestamps may be datetimes or ISO-8601 strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..utils.datetime_utils import elapsed_whole_seconds, now_utc, parse_timestamp

# Statuses during which the on-screen clock advances in real time
RUNNING_STATUSES = frozenset({"live", "second_half", "extra_time"})

# Interrupted but not over; the clock is frozen at the stored minute
PAUSED_STATUSES = frozenset({"half_time", "extra_time_break", "paused"})

ENDED_STATUSES = frozenset({"completed", "cancelled", "abandoned"})

# Statuses a live ticker / badge should show at all
DISPLAYABLE_STATUSES = RUNNING_STATUSES | frozenset({"half_time", "penalties", "paused"})

CONTROL_ACTIONS = (
    "start",
    "pause",
    "resume",
    "half_time",
    "second_half",
    "full_time",
    "extra_time",
    "end_extra_time",
    "penalties",
    "end_penalties",
)


@dataclass(frozen=True)
class _PhaseClock:
    timestamp_field: str
    base_minute: int
    fallback_minute: int


_PHASE_CLOCKS: dict[str, _PhaseClock] = {
    "live": _PhaseClock("match_started_at", 0, 0),
    "second_half": _PhaseClock("second_half_started_at", 45, 46),
    "extra_time": _PhaseClock("extra_time_started_at", 90, 91),
}


@dataclass(frozen=True)
class MatchPhase:
    """Display phase for a status, with its nominal minute range."""

    phase: str
    base_minute: int
    max_minute: int
    display_suffix: str | None = None


@dataclass(frozen=True)
class MatchTime:
    """Full clock reading for one match at one instant."""

    minute: int
    second: int
    display_time: str
    phase: str
    is_running: bool
    added_time: int


_PHASES: dict[str, MatchPhase] = {
    "scheduled": MatchPhase("not_started", 0, 0),
    "live": MatchPhase("first_half", 0, 45),
    "half_time": MatchPhase("half_time", 45, 45),
    "second_half": MatchPhase("second_half", 45, 90),
    "extra_time": MatchPhase("extra_time_first", 90, 105, "ET"),
    "extra_time_break": MatchPhase("extra_time_break", 105, 105, "ET"),
    "penalties": MatchPhase("penalties", 120, 120, "PEN"),
    "paused": MatchPhase("paused", 0, 120),
    "postponed": MatchPhase("paused", 0, 120),
    "suspended": MatchPhase("paused", 0, 120),
    "completed": MatchPhase("completed", 90, 120),
    "cancelled": MatchPhase("completed", 90, 120),
    "abandoned": MatchPhase("completed", 90, 120),
}

_EXTRA_TIME_SECOND = MatchPhase("extra_time_second", 105, 120, "ET")
_NOT_STARTED = _PHASES["scheduled"]


def _field(match: Any, name: str) -> Any:
    if isinstance(match, Mapping):
        return match.get(name)
    return getattr(match, name, None)


def _normalize_status(status: Any) -> str:
    if not status:
        return ""
    return str(status.value if hasattr(status, "value") else status).strip().lower()


def _stored_minute(match: Any, default: int = 0) -> int:
    minute = _field(match, "minute")
    return default if minute is None else int(minute)


def is_running(status: Any) -> bool:
    """True iff the clock advances for this status (live, second_half, extra_time)."""
    return _normalize_status(status) in RUNNING_STATUSES


def is_paused(status: Any) -> bool:
    return _normalize_status(status) in PAUSED_STATUSES


def is_ended(status: Any) -> bool:
    return _normalize_status(status) in ENDED_STATUSES


def is_displayable(status: Any) -> bool:
    return _normalize_status(status) in DISPLAYABLE_STATUSES


def match_phase(status: Any) -> MatchPhase:
    """Map a status to its display phase; unknown statuses read as not started."""
    return _PHASES.get(_normalize_status(status), _NOT_STARTED)


def compute_minute(match: Any, now: datetime | None = None) -> int:
    """Minute to display for `match` at `now`.

    Non-running statuses return the stored minute (0 if absent). Running
    statuses return the phase base (0 / 45 / 90) plus whole minutes since
    that phase's start timestamp. A missing timestamp falls back to the
    phase floor (0 / 46 / 91), or to the stored minute when it is already
    past that floor.

    The floor is applied on purpose, rather than preferring any stored
    minute: a second-half match without `second_half_started_at` still
    carries its first-half minute (say 38) until the sync task rewrites it,
    and showing 38' during the second half is wrong. A stored minute below
    the floor is therefore ignored.
    """
    clock = _PHASE_CLOCKS.get(_normalize_status(_field(match, "status")))
    if clock is None:
        return _stored_minute(match)

    started_at = parse_timestamp(_field(match, clock.timestamp_field))
    if started_at is None:
        return max(_stored_minute(match, clock.fallback_minute), clock.fallback_minute)

    elapsed = elapsed_whole_seconds(started_at, now or now_utc())
    return clock.base_minute + elapsed // 60


def calculate_match_time(match: Any, now: datetime | None = None) -> MatchTime:
    """Minute, second, phase and stoppage time for `match` at `now`."""
    now = now or now_utc()
    status = _normalize_status(_field(match, "status"))
    phase = match_phase(status)
    minute = compute_minute(match, now)

    clock = _PHASE_CLOCKS.get(status)
    started_at = parse_timestamp(_field(match, clock.timestamp_field)) if clock else None
    if started_at is None:
        return MatchTime(
            minute=minute,
            second=0,
            display_time=format_match_time(minute, 0),
            phase=phase.phase,
            is_running=False,
            added_time=0,
        )

    elapsed = elapsed_whole_seconds(started_at, now)
    second = elapsed % 60 if elapsed >= 0 else 0
    if status == "extra_time" and minute >= _EXTRA_TIME_SECOND.base_minute:
        phase = _EXTRA_TIME_SECOND

    return MatchTime(
        minute=minute,
        second=second,
        display_time=format_match_time(minute, second, phase.display_suffix),
        phase=phase.phase,
        is_running=True,
        added_time=max(0, minute - phase.max_minute),
    )


def format_match_time(minute: int, second: int, suffix: str | None = None) -> str:
    """Format as "MM:SS", or "MM:SS (ET)" with a phase suffix."""
    base = f"{minute:02d}:{second:02d}"
    return f"{base} ({suffix})" if suffix else base


def format_match_minute(match_time: MatchTime) -> str:
    """Broadcast-style minute: "45+2'" in stoppage time, "67'" otherwise."""
    if match_time.added_time > 0:
        nominal = match_time.minute - match_time.added_time
        return f"{nominal}+{match_time.added_time}'"
    return f"{match_time.minute}'"


def build_control_payload(
    action: str,
    now: datetime | None = None,
    current_minute: int | None = None,
) -> dict[str, Any]:
    """Column updates for a match-control action.

    Phase-start actions stamp their timestamp once; the clock is derived from
    those stamps afterwards. `resume` only flips the status back to live and
    leaves every timestamp untouched.

    Raises:
        ValueError: for an action outside CONTROL_ACTIONS.
    """
    now = now or now_utc()
    if action == "start":
        return {"status": "live", "minute": 0, "match_started_at": now}
    if action == "pause":
        return {"status": "paused", "minute": current_minute or 0}
    if action == "resume":
        return {"status": "live"}
    if action == "half_time":
        return {"status": "half_time", "minute": 45, "first_half_ended_at": now}
    if action == "second_half":
        return {"status": "second_half", "minute": 46, "second_half_started_at": now}
    if action == "full_time":
        return {
            "status": "completed",
            "minute": 90,
            "second_half_ended_at": now,
            "match_ended_at": now,
        }
    if action == "extra_time":
        return {"status": "extra_time", "minute": 91, "extra_time_started_at": now}
    if action == "end_extra_time":
        return {
            "status": "completed",
            "minute": 120,
            "extra_time_ended_at": now,
            "match_ended_at": now,
        }
    if action == "penalties":
        return {"status": "penalties", "minute": 120, "penalties_started_at": now}
    if action == "end_penalties":
        return {"status": "completed", "minute": 120, "match_ended_at": now}
    raise ValueError(f"Unknown match control action: {action!r}")
