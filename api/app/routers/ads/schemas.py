"""Ad-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...db.ads import AdEventType, AdSizeType


def _normalize_url(value: str | None) -> str | None:
    """Empty strings clear the URL; anything else must be http(s)."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not value.startswith(("http://", "https://", "/")):
        raise ValueError("must be an absolute http(s) URL or a site-relative path")
    return value


class AdResponse(BaseModel):
    """Creative as served to the public site."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    image: str
    image_large: str = Field(alias="imageLarge")
    image_small: str = Field(alias="imageSmall")
    alt: str
    link: str
    size_type: str | None = Field(None, alias="sizeType")


class AdTrackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ad_image_id: int = Field(..., alias="adImageId")
    event_type: AdEventType = Field(..., alias="eventType")
    page_url: str | None = Field(None, alias="pageUrl", max_length=1000)


class _CampaignFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("click_url", check_fields=False)
    @classmethod
    def _check_click_url(cls, value: str | None) -> str | None:
        return _normalize_url(value)

    @model_validator(mode="after")
    def _check_window(self) -> "_CampaignFields":
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start is not None and end is not None and end < start:
            raise ValueError("end_date must not be before start_date")
        return self


class CampaignCreateRequest(_CampaignFields):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    advertiser: str | None = Field(None, max_length=200)
    start_date: datetime | None = Field(None, alias="startDate")
    end_date: datetime | None = Field(None, alias="endDate")
    is_active: bool = Field(True, alias="isActive")
    priority: int = 0
    click_url: str | None = Field(None, alias="clickUrl")


class CampaignUpdateRequest(_CampaignFields):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    advertiser: str | None = Field(None, max_length=200)
    start_date: datetime | None = Field(None, alias="startDate")
    end_date: datetime | None = Field(None, alias="endDate")
    is_active: bool | None = Field(None, alias="isActive")
    priority: int | None = None
    click_url: str | None = Field(None, alias="clickUrl")


class CampaignResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str | None = None
    advertiser: str | None = None
    start_date: datetime | None = Field(None, alias="startDate")
    end_date: datetime | None = Field(None, alias="endDate")
    is_active: bool = Field(..., alias="isActive")
    priority: int
    click_url: str | None = Field(None, alias="clickUrl")
    image_count: int = Field(0, alias="imageCount")
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")


class _ImageFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("link_url", check_fields=False)
    @classmethod
    def _check_link_url(cls, value: str | None) -> str | None:
        return _normalize_url(value)

    @field_validator("target_pages", check_fields=False)
    @classmethod
    def _check_target_pages(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        pages = list(dict.fromkeys(page.strip() for page in value if page and page.strip()))
        if not pages:
            raise ValueError("target_pages must name at least one page (or 'all')")
        return pages


class AdImageCreateRequest(_ImageFields):
    campaign_id: int = Field(..., alias="campaignId")
    image_url_large: str = Field(..., min_length=1, alias="imageUrlLarge")
    image_url_small: str = Field(..., min_length=1, alias="imageUrlSmall")
    alt_text_en: str | None = Field(None, alias="altTextEn")
    alt_text_am: str | None = Field(None, alias="altTextAm")
    display_order: int = Field(0, alias="displayOrder")
    is_active: bool = Field(True, alias="isActive")
    target_pages: list[str] = Field(default_factory=lambda: ["home"], alias="targetPages")
    size_type: AdSizeType = Field(AdSizeType.full, alias="sizeType")
    link_url: str | None = Field(None, alias="linkUrl")


class AdImageUpdateRequest(_ImageFields):
    image_url_large: str | None = Field(None, min_length=1, alias="imageUrlLarge")
    image_url_small: str | None = Field(None, min_length=1, alias="imageUrlSmall")
    alt_text_en: str | None = Field(None, alias="altTextEn")
    alt_text_am: str | None = Field(None, alias="altTextAm")
    display_order: int | None = Field(None, alias="displayOrder")
    is_active: bool | None = Field(None, alias="isActive")
    target_pages: list[str] | None = Field(None, alias="targetPages")
    size_type: AdSizeType | None = Field(None, alias="sizeType")
    link_url: str | None = Field(None, alias="linkUrl")


class AdImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    campaign_id: int = Field(..., alias="campaignId")
    campaign_name: str | None = Field(None, alias="campaignName")
    image_url: str | None = Field(None, alias="imageUrl")
    image_url_large: str | None = Field(None, alias="imageUrlLarge")
    image_url_small: str | None = Field(None, alias="imageUrlSmall")
    alt_text_en: str | None = Field(None, alias="altTextEn")
    alt_text_am: str | None = Field(None, alias="altTextAm")
    display_order: int = Field(0, alias="displayOrder")
    is_active: bool = Field(..., alias="isActive")
    target_pages: list[str] = Field(default_factory=list, alias="targetPages")
    size_type: str | None = Field(None, alias="sizeType")
    link_url: str | None = Field(None, alias="linkUrl")
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")
