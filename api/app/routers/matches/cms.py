"""CMS match-control endpoint."""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, status

from ...db import AsyncSession, get_db
from ...db.sports import Match
from ...dependencies import verify_api_key
from ...services.match_clock import build_control_payload, compute_minute
from ...utils.datetime_utils import now_utc
from .helpers import MATCH_RELATIONS, serialize_match
from .schemas import MatchControlRequest, MatchResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/cms/matches",
    tags=["cms-matches"],
    dependencies=[Depends(verify_api_key)],
)


@router.patch("/{match_id}/control", response_model=MatchResponse)
async def control_match(
    match_id: int,
    payload: MatchControlRequest,
    session: AsyncSession = Depends(get_db),
) -> MatchResponse:
    """Apply a match-control action and/or explicit field updates."""
    match = await session.get(Match, match_id, options=list(MATCH_RELATIONS))
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")

    now = now_utc()
    updates: dict[str, object] = {}
    if payload.action:
        updates.update(
            build_control_payload(
                payload.action, now, current_minute=compute_minute(match, now)
            )
        )
    updates.update(payload.model_dump(exclude_unset=True, exclude={"action"}))

    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No control action or fields supplied",
        )

    for field, value in updates.items():
        setattr(match, field, value.value if isinstance(value, Enum) else value)
    match.updated_at = now
    await session.flush()

    logger.info(
        "Match control applied",
        extra={
            "match_id": match_id,
            "action": payload.action,
            "status": match.status,
            "fields": sorted(updates),
        },
    )
    return serialize_match(match, now)
