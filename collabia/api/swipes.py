"""
Collabia — Swipes API

Swipe feed, swipe recording and the daily quota.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.api.deps import get_current_user_id, get_ranking_service, get_swipe_service
from collabia.database import get_db
from collabia.schemas.interest import InterestResponse
from collabia.schemas.swipe import (
    SwipeCreate,
    SwipeQuotaResponse,
    SwipeRecordResponse,
    SwipeResponse,
)
from collabia.schemas.user import UserProfile
from collabia.services.ranking_service import RankingService
from collabia.services.swipe_service import SwipeService

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /candidates: Ranked swipe feed
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/candidates",
    response_model=list[UserProfile],
    summary="Get ranked swipe candidates",
)
async def list_candidates(
    limit: int | None = Query(None, ge=1, le=500, description="Page size (omit for the full feed)"),
    offset: int = Query(0, ge=0, description="Number of candidates to skip"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    ranking: RankingService = Depends(get_ranking_service),
    db: AsyncSession = Depends(get_db),
) -> list[UserProfile]:
    """Return users the caller has not decided on yet, most relevant first.

    Liked and superliked users never come back.  Passed users come back
    once their deny-list window has lapsed.
    """
    candidates = await ranking.list_candidates(user_id, db, limit=limit, offset=offset)
    return [UserProfile.model_validate(c) for c in candidates]


# ──────────────────────────────────────────────────────────────────────────────
# POST /: Record a swipe
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/",
    response_model=SwipeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a swipe action",
)
async def record_swipe(
    payload: SwipeCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    swipes: SwipeService = Depends(get_swipe_service),
    db: AsyncSession = Depends(get_db),
) -> SwipeResponse:
    """Record a pass / like / superlike.

    Likes and superlikes create (or refresh) a pending interest that the
    other user can accept or decline.  Returns 429 once today's quota is
    used up.
    """
    outcome = await swipes.record_swipe(
        swiper_id=user_id,
        swiped_id=payload.swiped_id,
        direction=payload.direction,
        db_session=db,
    )
    return SwipeResponse(
        swipe=SwipeRecordResponse.model_validate(outcome.record),
        interest=(
            InterestResponse.model_validate(outcome.interest)
            if outcome.interest is not None
            else None
        ),
        status=outcome.status,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /quota: Today's swipe count
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/quota",
    response_model=SwipeQuotaResponse,
    summary="Get today's swipe count and limit",
)
async def get_swipe_quota(
    user_id: uuid.UUID = Depends(get_current_user_id),
    swipes: SwipeService = Depends(get_swipe_service),
    db: AsyncSession = Depends(get_db),
) -> SwipeQuotaResponse:
    quota = await swipes.get_quota(user_id, db)
    return SwipeQuotaResponse(
        count=quota.count,
        limit=quota.limit,
        remaining=quota.remaining,
    )
