"""Ad creative selection for a page slot.

Pure filter → sort → map pipeline over creatives already loaded with their
parent campaign. Nothing here raises for well-formed rows; a request with no
eligible creative simply yields an empty list.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Iterable

from ..utils.datetime_utils import ensure_utc, now_utc, parse_timestamp

WILDCARD_PAGE = "all"
DEFAULT_ALT_TEXT = "Advertisement"
PLACEHOLDER_LINK = "#"

# Slot size → creative sizes that may fill it. "full" banners double as
# inline content; nothing else substitutes.
_SIZE_FALLBACKS: dict[str, frozenset[str]] = {
    "inline": frozenset({"inline", "full"}),
}


@dataclass(frozen=True)
class AdDisplay:
    """One creative as served to the page."""

    id: Any
    image: str
    image_large: str
    image_small: str
    alt: str
    link: str
    size_type: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def fits_slot(image_size: str | None, slot_size: str) -> bool:
    """Whether a creative of `image_size` may render in a `slot_size` slot.

    Creatives without a size type are eligible for every slot.
    """
    if not image_size:
        return True
    return image_size in _SIZE_FALLBACKS.get(slot_size, frozenset({slot_size}))


def targets_page(target_pages: Iterable[str] | None, page: str) -> bool:
    pages = set(target_pages or ())
    return page in pages or WILDCARD_PAGE in pages


def within_window(campaign: Any, now: datetime) -> bool:
    """Both campaign bounds are optional and inclusive of `now`.

    A date-only end bound covers that whole (UTC) day.
    """
    start = parse_timestamp(campaign.start_date)
    if start is not None and start > now:
        return False
    if isinstance(campaign.end_date, date) and not isinstance(campaign.end_date, datetime):
        return now.date() <= campaign.end_date
    end = parse_timestamp(campaign.end_date)
    if end is not None and end < now:
        return False
    return True


def is_eligible(image: Any, page: str, size_type: str, now: datetime) -> bool:
    campaign = getattr(image, "campaign", None)
    if campaign is None or not campaign.is_active:
        return False
    if getattr(image, "is_active", True) is False:
        return False
    if not fits_slot(image.size_type, size_type):
        return False
    if not targets_page(image.target_pages, page):
        return False
    return within_window(campaign, now)


def _rank_key(image: Any) -> tuple[int, int]:
    return (-(image.campaign.priority or 0), image.display_order or 0)


def to_display(image: Any) -> AdDisplay:
    """Resolve image, alt-text and link fallbacks for one creative."""
    legacy = image.image_url or ""
    large = image.image_url_large or legacy
    return AdDisplay(
        id=image.id,
        image=large,
        image_large=large,
        image_small=image.image_url_small or legacy,
        alt=image.alt_text_en or image.alt_text_am or DEFAULT_ALT_TEXT,
        link=image.link_url or image.campaign.click_url or PLACEHOLDER_LINK,
        size_type=image.size_type,
    )


def select_ads(
    images: Iterable[Any],
    page: str,
    size_type: str,
    now: datetime | None = None,
) -> list[AdDisplay]:
    """Eligible creatives for `(page, size_type)`, best first.

    Ordering is campaign priority descending, then display order ascending;
    the sort is stable so equal keys keep their input order.
    """
    now = ensure_utc(now or now_utc())
    eligible = [image for image in images if is_eligible(image, page, size_type, now)]
    eligible.sort(key=_rank_key)
    return [to_display(image) for image in eligible]
