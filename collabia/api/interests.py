"""
Collabia — Interests API

Received / sent interests, badge counts, accepting or declining, and the
"have I already liked them" lookup.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.api.deps import get_current_user_id, get_interest_service
from collabia.database import get_db
from collabia.schemas.interest import (
    CountResponse,
    InterestListItem,
    InterestResponse,
    InterestStatusResponse,
    RespondRequest,
    RespondResponse,
)
from collabia.schemas.match import ConversationResponse, MatchResponse
from collabia.schemas.user import UserProfile
from collabia.services.interest_service import InterestEntry, InterestService

router = APIRouter()


def _list_item(entry: InterestEntry) -> InterestListItem:
    return InterestListItem(
        interest_id=entry.interest.id,
        is_super_like=entry.interest.is_super_like,
        created_at=entry.interest.created_at,
        user=UserProfile.model_validate(entry.user) if entry.user else None,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /received, /sent: Pending interests
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/received",
    response_model=list[InterestListItem],
    summary="List pending interests received",
)
async def list_received_interests(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> list[InterestListItem]:
    entries = await interests.list_received(user_id, db)
    return [_list_item(e) for e in entries]


@router.get(
    "/sent",
    response_model=list[InterestListItem],
    summary="List pending interests sent",
)
async def list_sent_interests(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> list[InterestListItem]:
    entries = await interests.list_sent(user_id, db)
    return [_list_item(e) for e in entries]


# ──────────────────────────────────────────────────────────────────────────────
# GET /received/count, /sent/count: Badge counts
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/received/count", response_model=CountResponse, summary="Pending received count")
async def get_pending_received_count(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> CountResponse:
    return CountResponse(count=await interests.count_pending_received(user_id, db))


@router.get("/sent/count", response_model=CountResponse, summary="Pending sent count")
async def get_pending_sent_count(
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> CountResponse:
    return CountResponse(count=await interests.count_pending_sent(user_id, db))


# ──────────────────────────────────────────────────────────────────────────────
# POST /{interest_id}/respond: Accept or decline
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/{interest_id}/respond",
    response_model=RespondResponse,
    summary="Accept or decline a received interest",
)
async def respond_to_interest(
    interest_id: uuid.UUID,
    payload: RespondRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> RespondResponse:
    """Accepting creates the match and the conversation so the client can
    open the chat immediately.  Only the receiver may respond, and only
    once."""
    result = await interests.respond(interest_id, user_id, payload.action, db)
    return RespondResponse(
        interest=InterestResponse.model_validate(result.interest),
        conversation=(
            ConversationResponse.model_validate(result.conversation)
            if result.conversation is not None
            else None
        ),
        match=(
            MatchResponse.model_validate(result.match)
            if result.match is not None
            else None
        ),
        other_user=(
            UserProfile.model_validate(result.other_user)
            if result.other_user is not None
            else None
        ),
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /status/{target_id}: Have I already expressed interest?
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/status/{target_id}",
    response_model=InterestStatusResponse,
    summary="Check whether the caller already sent interest to a user",
)
async def get_interest_status(
    target_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    interests: InterestService = Depends(get_interest_service),
    db: AsyncSession = Depends(get_db),
) -> InterestStatusResponse:
    lookup = await interests.get_status(user_id, target_id, db)
    return InterestStatusResponse(
        has_sent_interest=lookup.has_sent_interest,
        status=lookup.status,
        is_super_like=lookup.is_super_like,
    )
