"""
Collabia — Matches API

Established matches plus the sender-side "new match" badge bookkeeping.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.api.deps import get_current_user_id, get_interest_service, get_match_service
from collabia.database import get_db
from collabia.schemas.interest import CountResponse, InterestResponse, MarkSeenResponse
from collabia.schemas.match import MatchListItem, NewMatchItem
from collabia.schemas.user import UserProfile
from collabia.services.interest_service import InterestService
from collabia.services.match_service import MatchService

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# GET /: All matches for the caller
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/", response_model=list[MatchListItem], summary="List all matches")
async def list_matches(
    user_id: uuid.UUID = Depends(get_current_user_id),
    matches: MatchService = Depends(get_match_service),
    db: AsyncSession = Depends(get_db),
) -> list[MatchListItem]:
    entries = await matches.list_matches(user_id, db)
    return [
        MatchListItem(
            match_id=e.match.id,
            matched_at=e.match.created_at,
            user=UserProfile.model_validate(e.user) if e.user else None,
        )
        for e in entries
    ]


# ──────────────────────────────────────────────────────────────────────────────
# GET /new, /new/count: Accepted interests the sender has not seen
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/new", response_model=list[NewMatchItem], summary="List unseen new matches")
async def list_new_matches(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> list[NewMatchItem]:
    entries = await interests.list_new_matches(user_id, db)
    return [
        NewMatchItem(
            interest_id=e.interest.id,
            matched_at=e.interest.responded_at,
            user=UserProfile.model_validate(e.user) if e.user else None,
        )
        for e in entries
    ]


@router.get("/new/count", response_model=CountResponse, summary="Unseen new match count")
async def get_new_matches_count(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> CountResponse:
    return CountResponse(count=await interests.count_new_matches(user_id, db))


# ──────────────────────────────────────────────────────────────────────────────
# POST /new/seen, /new/{interest_id}/seen: Clear the badge
# ──────────────────────────────────────────────────────────────────────────────

@router.post("/new/seen", response_model=MarkSeenResponse, summary="Mark all new matches as seen")
async def mark_all_matches_seen(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> MarkSeenResponse:
    updated = await interests.mark_all_seen(user_id, db)
    return MarkSeenResponse(success=True, updated=updated)


@router.post(
    "/new/{interest_id}/seen",
    response_model=MarkSeenResponse,
    summary="Mark one new match as seen",
)
async def mark_match_seen(
    interest_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> MarkSeenResponse:
    interest = await interests.mark_seen(interest_id, user_id, db)
    return MarkSeenResponse(
        success=True,
        interest=InterestResponse.model_validate(interest),
    )
