"""Advertising models: campaigns, creatives and their analytics events."""

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
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import text

from .base import Base


class AdSizeType(str, Enum):
    """Slot sizes a creative can be rendered in."""

    full = "full"
    sidebar = "sidebar"
    inline = "inline"
    popup = "popup"


class AdEventType(str, Enum):
    impression = "impression"
    click = "click"


class AdCampaign(Base):
    """Scheduling, priority and click-through target shared by a set of creatives."""

    __tablename__ = "ad_campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    advertiser: Mapped[str | None] = mapped_column(String(200), nullable=True)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    click_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    images: Mapped[list["AdImage"]] = relationship(
        "AdImage", back_populates="campaign", cascade="all, delete-orphan"
    )


class AdImage(Base):
    """One banner creative with its own page targeting and display order."""

    __tablename__ = "ad_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ad_campaigns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)  # legacy
    image_url_large: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    image_url_small: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    alt_text_en: Mapped[str | None] = mapped_column(String(300), nullable=True)
    alt_text_am: Mapped[str | None] = mapped_column(String(300), nullable=True)
    link_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    target_pages: Mapped[list[str]] = mapped_column(
        JSONB, server_default=text("'[\"home\"]'::jsonb"), nullable=False
    )
    size_type: Mapped[str | None] = mapped_column(
        String(20), default=AdSizeType.full.value, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    campaign: Mapped[AdCampaign] = relationship("AdCampaign", back_populates="images")

    __table_args__ = (Index("idx_ad_images_active_order", "is_active", "display_order"),)


class AdEvent(Base):
    """Impression or click recorded from the public site."""

    __tablename__ = "ad_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ad_image_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ad_images.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    page_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
