"""Public ad serving and tracking endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.orm import contains_eager

from ...db import AsyncSession, get_db
from ...db.ads import AdCampaign, AdEvent, AdImage, AdSizeType
from ...services.ad_selector import select_ads
from ...utils.datetime_utils import now_utc
from .schemas import AdResponse, AdTrackRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public/ads", tags=["ads"])


@router.get("", response_model=list[AdResponse])
async def get_ads(
    page: str = Query("home", min_length=1, max_length=100),
    size_type: AdSizeType = Query(AdSizeType.full, alias="sizeType"),
    session: AsyncSession = Depends(get_db),
) -> list[AdResponse]:
    """Creatives eligible for a page slot, highest campaign priority first."""
    stmt = (
        select(AdImage)
        .join(AdImage.campaign)
        .where(AdImage.is_active.is_(True), AdCampaign.is_active.is_(True))
        .options(contains_eager(AdImage.campaign))
        .order_by(AdImage.display_order)
    )
    result = await session.execute(stmt)
    images = result.scalars().all()

    ads = select_ads(images, page, size_type.value, now_utc())
    logger.debug(
        "Ads selected",
        extra={"page": page, "size_type": size_type.value, "candidates": len(images), "served": len(ads)},
    )
    return [AdResponse(**ad.to_dict()) for ad in ads]


@router.post("/track")
async def track_ad_event(
    payload: AdTrackRequest,
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> dict[str, bool]:
    """Record an impression or click for one creative."""
    image = await session.get(AdImage, payload.ad_image_id)
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad image not found")

    session.add(
        AdEvent(
            ad_image_id=payload.ad_image_id,
            event_type=payload.event_type.value,
            page_url=payload.page_url,
            user_agent=(request.headers.get("user-agent") or "")[:500] or None,
        )
    )
    await session.flush()
    return {"success": True}
