"""
Collabia — Discovery API

Students reading, playing or learning the same thing as the caller.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.api.deps import get_current_user_id, get_discovery_service
from collabia.database import get_db
from collabia.schemas.user import SameInterestGroup, SameInterestsResponse, UserProfile
from collabia.services.discovery_service import DiscoveryService

router = APIRouter()


def _group(group: dict | None) -> SameInterestGroup | None:
    if group is None:
        return None
    return SameInterestGroup(
        value=group["value"],
        users=[UserProfile.model_validate(u) for u in group["users"]],
    )


@router.get(
    "/same-interests",
    response_model=SameInterestsResponse,
    summary="Users sharing the caller's current book, game or skill",
)
async def same_interests(
    user_id: uuid.UUID = Depends(get_current_user_id),
    discovery: DiscoveryService = Depends(get_discovery_service),
    db: AsyncSession = Depends(get_db),
) -> SameInterestsResponse:
    groups = await discovery.find_same_interests(user_id, db)
    return SameInterestsResponse(**{kind: _group(g) for kind, g in groups.items()})


@router.get(
    "/same-interests/{kind}",
    response_model=SameInterestGroup,
    summary="Users sharing one of the caller's current interests",
)
async def same_interest_by_kind(
    kind: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    discovery: DiscoveryService = Depends(get_discovery_service),
    db: AsyncSession = Depends(get_db),
) -> SameInterestGroup:
    """``kind`` is one of ``book``, ``game`` or ``skill``."""
    group = await discovery.find_same_interest(user_id, kind, db)
    return _group(group)
