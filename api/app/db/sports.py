"""Core sports models: leagues, teams, matches."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class MatchStatus(str, Enum):
    """Match status lifecycle.

    Happy path: scheduled → live → half_time → second_half → completed,
    optionally → extra_time → penalties → completed.
    """

    scheduled = "scheduled"
    live = "live"                # first half, clock running
    half_time = "half_time"
    second_half = "second_half"
    extra_time = "extra_time"
    penalties = "penalties"
    paused = "paused"
    completed = "completed"
    postponed = "postponed"
    cancelled = "cancelled"


class League(Base):
    """Competitions (premier league, higher league, cups)."""

    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name_en: Mapped[str] = mapped_column(String(200), nullable=False)
    name_am: Mapped[str | None] = mapped_column(String(200), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    matches: Mapped[list["Match"]] = relationship(
        "Match", back_populates="league", cascade="all, delete-orphan"
    )


class Team(Base):
    """Clubs and national sides."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name_en: Mapped[str] = mapped_column(String(200), nullable=False)
    name_am: Mapped[str | None] = mapped_column(String(200), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Match(Base):
    """A fixture plus the phase timestamps the live clock is derived from.

    `minute` is the fallback of record; the displayed minute is always
    recomputed from the *_started_at columns while the clock is running.
    """

    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("leagues.id", ondelete="CASCADE"), nullable=True, index=True
    )
    home_team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False
    )
    away_team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False
    )
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=MatchStatus.scheduled.value, nullable=False
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    score_home: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    score_away: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    penalty_score_home: Mapped[int | None] = mapped_column(Integer, nullable=True)
    penalty_score_away: Mapped[int | None] = mapped_column(Integer, nullable=True)

    minute: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)
    first_half_injury_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    second_half_injury_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    match_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    first_half_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    second_half_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    second_half_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    extra_time_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    extra_time_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    penalties_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    match_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    league: Mapped[League | None] = relationship("League", back_populates="matches")
    home_team: Mapped[Team] = relationship("Team", foreign_keys=[home_team_id])
    away_team: Mapped[Team] = relationship("Team", foreign_keys=[away_team_id])

    __table_args__ = (Index("idx_matches_status_date", "status", "date"),)
