"""Match-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ...db.sports import MatchStatus

ControlAction = Literal[
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
]


class TeamRef(BaseModel):
    """Team as embedded in a match."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    slug: str
    name_en: str = Field(alias="nameEn")
    name_am: str | None = Field(None, alias="nameAm")
    logo_url: str | None = Field(None, alias="logoUrl")


class LeagueRef(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    slug: str
    name_en: str = Field(alias="nameEn")
    name_am: str | None = Field(None, alias="nameAm")
    logo_url: str | None = Field(None, alias="logoUrl")


class MatchResponse(BaseModel):
    """Match record plus the clock reading derived at response time."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    status: str
    date: datetime | None = None
    score_home: int = Field(0, alias="scoreHome")
    score_away: int = Field(0, alias="scoreAway")
    penalty_score_home: int | None = Field(None, alias="penaltyScoreHome")
    penalty_score_away: int | None = Field(None, alias="penaltyScoreAway")
    minute: int | None = None
    match_started_at: datetime | None = Field(None, alias="matchStartedAt")
    second_half_started_at: datetime | None = Field(None, alias="secondHalfStartedAt")
    extra_time_started_at: datetime | None = Field(None, alias="extraTimeStartedAt")
    home_team: TeamRef | None = Field(None, alias="homeTeam")
    away_team: TeamRef | None = Field(None, alias="awayTeam")
    league: LeagueRef | None = None

    # Derived clock
    calculated_minute: int = Field(..., alias="calculatedMinute")
    display_minute: str = Field(..., alias="displayMinute")
    display_time: str = Field(..., alias="displayTime")
    phase: str
    is_running: bool = Field(..., alias="isRunning")
    added_time: int = Field(0, alias="addedTime")


class MatchControlRequest(BaseModel):
    """Match-control update.

    `action` expands to the status/minute/timestamp columns of that action;
    any explicitly supplied field overrides what the action produced.
    """

    model_config = ConfigDict(populate_by_name=True)

    action: ControlAction | None = None
    status: MatchStatus | None = None
    minute: int | None = Field(None, ge=0, le=200)
    score_home: int | None = Field(None, ge=0, alias="scoreHome")
    score_away: int | None = Field(None, ge=0, alias="scoreAway")
    penalty_score_home: int | None = Field(None, ge=0, alias="penaltyScoreHome")
    penalty_score_away: int | None = Field(None, ge=0, alias="penaltyScoreAway")
    match_started_at: datetime | None = Field(None, alias="matchStartedAt")
    second_half_started_at: datetime | None = Field(None, alias="secondHalfStartedAt")
    extra_time_started_at: datetime | None = Field(None, alias="extraTimeStartedAt")
