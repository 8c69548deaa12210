"""
Collabia — Shared API dependencies.

Token verification happens upstream (gateway / auth middleware).  By the
time a request reaches these routes the authenticated user id is carried in
the ``X-User-Id`` header.
"""

from __future__ import annotations

import uuid

from fastapi import Header

from collabia.services.discovery_service import DiscoveryService
from collabia.services.interest_service import InterestService
from collabia.services.match_service import MatchService
from collabia.services.ranking_service import RankingService
from collabia.services.swipe_service import SwipeService


async def get_current_user_id(
    x_user_id: uuid.UUID = Header(..., description="Authenticated user id"),
) -> uuid.UUID:
    return x_user_id


# ── Service singletons ────────────────────────────────────────────────────────

_swipe_service: SwipeService | None = None
_ranking_service: RankingService | None = None
_interest_service: InterestService | None = None
_match_service: MatchService | None = None
_discovery_service: DiscoveryService | None = None


def get_swipe_service() -> SwipeService:
    global _swipe_service
    if _swipe_service is None:
        _swipe_service = SwipeService(interest_service=get_interest_service())
    return _swipe_service


def get_ranking_service() -> RankingService:
    global _ranking_service
    if _ranking_service is None:
        _ranking_service = RankingService()
    return _ranking_service


def get_interest_service() -> InterestService:
    global _interest_service
    if _interest_service is None:
        _interest_service = InterestService(match_service=get_match_service())
    return _interest_service


def get_match_service() -> MatchService:
    global _match_service
    if _match_service is None:
        _match_service = MatchService()
    return _match_service


def get_discovery_service() -> DiscoveryService:
    global _discovery_service
    if _discovery_service is None:
        _discovery_service = DiscoveryService()
    return _discovery_service
