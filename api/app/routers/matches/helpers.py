"""Helpers shared by the public and CMS match endpoints."""

from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy.orm import selectinload

from ...db.sports import Match
from ...services.match_clock import calculate_match_time, format_match_minute
from .schemas import LeagueRef, MatchResponse, TeamRef

MATCH_RELATIONS = (
    selectinload(Match.home_team),
    selectinload(Match.away_team),
    selectinload(Match.league),
)


def serialize_match(match: Match, now: datetime) -> MatchResponse:
    """Build the API representation, reading the clock at `now`."""
    clock = calculate_match_time(match, now)
    return MatchResponse(
        id=match.id,
        status=match.status,
        date=match.date,
        scoreHome=match.score_home or 0,
        scoreAway=match.score_away or 0,
        penaltyScoreHome=match.penalty_score_home,
        penaltyScoreAway=match.penalty_score_away,
        minute=match.minute,
        matchStartedAt=match.match_started_at,
        secondHalfStartedAt=match.second_half_started_at,
        extraTimeStartedAt=match.extra_time_started_at,
        homeTeam=TeamRef.model_validate(match.home_team) if match.home_team else None,
        awayTeam=TeamRef.model_validate(match.away_team) if match.away_team else None,
        league=LeagueRef.model_validate(match.league) if match.league else None,
        calculatedMinute=clock.minute,
        displayMinute=format_match_minute(clock),
        displayTime=clock.display_time,
        phase=clock.phase,
        isRunning=clock.is_running,
        addedTime=clock.added_time,
    )


def sse_event(payload: dict) -> str:
    """Encode one Server-Sent Events `data:` frame."""
    return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"
