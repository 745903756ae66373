"""CMS endpoints for ad campaigns and their creatives."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import desc, func, select
from sqlalchemy.orm import selectinload

from ...db import AsyncSession, get_db
from ...db.ads import AdCampaign, AdImage
from ...dependencies import verify_api_key
from ...utils.datetime_utils import parse_timestamp
from .schemas import (
    AdImageCreateRequest,
    AdImageResponse,
    AdImageUpdateRequest,
    CampaignCreateRequest,
    CampaignResponse,
    CampaignUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/cms/ads",
    tags=["cms-ads"],
    dependencies=[Depends(verify_api_key)],
)


def _column_values(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}


def _campaign_response(campaign: AdCampaign, image_count: int) -> CampaignResponse:
    return CampaignResponse(
        id=campaign.id,
        name=campaign.name,
        description=campaign.description,
        advertiser=campaign.advertiser,
        startDate=campaign.start_date,
        endDate=campaign.end_date,
        isActive=campaign.is_active,
        priority=campaign.priority or 0,
        clickUrl=campaign.click_url,
        imageCount=image_count,
        createdAt=campaign.created_at,
        updatedAt=campaign.updated_at,
    )


def _image_response(image: AdImage, campaign_name: str | None = None) -> AdImageResponse:
    return AdImageResponse(
        id=image.id,
        campaignId=image.campaign_id,
        campaignName=campaign_name,
        imageUrl=image.image_url,
        imageUrlLarge=image.image_url_large,
        imageUrlSmall=image.image_url_small,
        altTextEn=image.alt_text_en,
        altTextAm=image.alt_text_am,
        displayOrder=image.display_order or 0,
        isActive=image.is_active,
        targetPages=list(image.target_pages or []),
        sizeType=image.size_type,
        linkUrl=image.link_url,
        createdAt=image.created_at,
        updatedAt=image.updated_at,
    )


async def _get_campaign_or_404(session: AsyncSession, campaign_id: int) -> AdCampaign:
    campaign = await session.get(AdCampaign, campaign_id)
    if campaign is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
    return campaign


async def _get_image_or_404(session: AsyncSession, image_id: int) -> AdImage:
    image = await session.get(AdImage, image_id, options=[selectinload(AdImage.campaign)])
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad image not found")
    return image


# ────────────────────────────────────────────────────────────────────────────────
# Campaigns
# ────────────────────────────────────────────────────────────────────────────────


@router.get("/campaigns", response_model=list[CampaignResponse])
async def list_campaigns(session: AsyncSession = Depends(get_db)) -> list[CampaignResponse]:
    """All campaigns, newest first, with their creative counts."""
    stmt = (
        select(AdCampaign, func.count(AdImage.id).label("image_count"))
        .outerjoin(AdImage, AdImage.campaign_id == AdCampaign.id)
        .group_by(AdCampaign.id)
        .order_by(desc(AdCampaign.created_at))
    )
    result = await session.execute(stmt)
    return [_campaign_response(campaign, count or 0) for campaign, count in result.all()]


@router.post("/campaigns", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    payload: CampaignCreateRequest,
    session: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign = AdCampaign(**_column_values(payload.model_dump()))
    session.add(campaign)
    await session.flush()
    await session.refresh(campaign)
    logger.info("Ad campaign created", extra={"campaign_id": campaign.id, "campaign_name": campaign.name})
    return _campaign_response(campaign, 0)


@router.get("/campaigns/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(campaign_id: int, session: AsyncSession = Depends(get_db)) -> CampaignResponse:
    campaign = await _get_campaign_or_404(session, campaign_id)
    count = await session.execute(
        select(func.count(AdImage.id)).where(AdImage.campaign_id == campaign_id)
    )
    return _campaign_response(campaign, count.scalar() or 0)


@router.patch("/campaigns/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: int,
    payload: CampaignUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> CampaignResponse:
    campaign = await _get_campaign_or_404(session, campaign_id)
    updates = _column_values(payload.model_dump(exclude_unset=True))

    start = parse_timestamp(updates.get("start_date", campaign.start_date))
    end = parse_timestamp(updates.get("end_date", campaign.end_date))
    if start is not None and end is not None and end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date",
        )

    for field, value in updates.items():
        setattr(campaign, field, value)
    await session.flush()
    await session.refresh(campaign)

    count = await session.execute(
        select(func.count(AdImage.id)).where(AdImage.campaign_id == campaign_id)
    )
    logger.info("Ad campaign updated", extra={"campaign_id": campaign_id, "fields": sorted(updates)})
    return _campaign_response(campaign, count.scalar() or 0)


@router.delete("/campaigns/{campaign_id}")
async def delete_campaign(campaign_id: int, session: AsyncSession = Depends(get_db)) -> dict[str, bool]:
    """Delete a campaign; its creatives go with it."""
    campaign = await _get_campaign_or_404(session, campaign_id)
    await session.delete(campaign)
    await session.flush()
    logger.info("Ad campaign deleted", extra={"campaign_id": campaign_id})
    return {"success": True}


# ────────────────────────────────────────────────────────────────────────────────
# Creatives
# ────────────────────────────────────────────────────────────────────────────────


@router.get("", response_model=list[AdImageResponse])
async def list_ad_images(
    campaign_id: int | None = Query(None, alias="campaignId"),
    session: AsyncSession = Depends(get_db),
) -> list[AdImageResponse]:
    stmt = select(AdImage).options(selectinload(AdImage.campaign)).order_by(AdImage.display_order)
    if campaign_id is not None:
        stmt = stmt.where(AdImage.campaign_id == campaign_id)
    result = await session.execute(stmt)
    return [
        _image_response(image, image.campaign.name if image.campaign else None)
        for image in result.scalars().all()
    ]


@router.post("", response_model=AdImageResponse, status_code=status.HTTP_201_CREATED)
async def create_ad_image(
    payload: AdImageCreateRequest,
    session: AsyncSession = Depends(get_db),
) -> AdImageResponse:
    campaign = await _get_campaign_or_404(session, payload.campaign_id)
    image = AdImage(**_column_values(payload.model_dump()))
    session.add(image)
    await session.flush()
    await session.refresh(image)
    logger.info("Ad image created", extra={"ad_image_id": image.id, "campaign_id": campaign.id})
    return _image_response(image, campaign.name)


@router.get("/{image_id}", response_model=AdImageResponse)
async def get_ad_image(image_id: int, session: AsyncSession = Depends(get_db)) -> AdImageResponse:
    image = await _get_image_or_404(session, image_id)
    return _image_response(image, image.campaign.name if image.campaign else None)


@router.patch("/{image_id}", response_model=AdImageResponse)
async def update_ad_image(
    image_id: int,
    payload: AdImageUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> AdImageResponse:
    image = await _get_image_or_404(session, image_id)
    updates = _column_values(payload.model_dump(exclude_unset=True))
    for field, value in updates.items():
        setattr(image, field, value)
    await session.flush()
    await session.refresh(image)
    logger.info("Ad image updated", extra={"ad_image_id": image_id, "fields": sorted(updates)})
    return _image_response(image, image.campaign.name if image.campaign else None)


@router.delete("/{image_id}")
async def delete_ad_image(image_id: int, session: AsyncSession = Depends(get_db)) -> dict[str, bool]:
    image = await _get_image_or_404(session, image_id)
    await session.delete(image)
    await session.flush()
    logger.info("Ad image deleted", extra={"ad_image_id": image_id})
    return {"success": True}
