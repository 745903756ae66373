"""Flat re-export of every SQLAlchemy model (used by Alembic autogenerate)."""

from __future__ import annotations

from .db.ads import AdCampaign, AdEvent, AdEventType, AdImage, AdSizeType
from .db.base import Base
from .db.sports import League, Match, MatchStatus, Team

__all__ = [
    "AdCampaign",
    "AdEvent",
    "AdEventType",
    "AdImage",
    "AdSizeType",
    "Base",
    "League",
    "Match",
    "MatchStatus",
    "Team",
]
