"""
Collabia — Candidate Ranker

Builds the swipe feed for a student.

Eligibility:
  * never the viewer themself
  * never someone the viewer liked or superliked (permanent)
  * not someone the viewer passed on while the pass is still live
    (``expires_at > now``); lapsed passes re-enter the pool

Score (purely additive, no normalisation):
  shared tags      +20 per viewer tag (interests ++ skills) found in the
                   candidate's tags, case-insensitive
  same location    +30
  open-to overlap  cofounder +25, projects +20, study partner +15,
                   accountability +15, helping others +10
  recency          +15 (<24h), +10 (<72h), +5 (<168h) since last active
  verified school  +5

Candidates are returned best first.  Equal scores keep the candidate pool's
retrieval order.
"""

from __future__ import annotations

import heapq
import uuid
from datetime import datetime

import structlog
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.clock import Clock, utcnow
from collabia.exceptions import InvalidInput, NotFound
from collabia.models.swipe import INTEREST_DIRECTIONS, SwipeDirection, SwipeRecord
from collabia.models.user import OpenToFlags, User
from collabia.services.profile_store import ProfileStore

logger = structlog.get_logger("collabia.ranking_service")

# ──────────────────────────────────────────────────────────────────────────────
# Scoring weights
# ──────────────────────────────────────────────────────────────────────────────

SHARED_TAG_POINTS = 20
SAME_LOCATION_POINTS = 30
VERIFIED_SCHOOL_POINTS = 5

OPEN_TO_POINTS: dict[str, int] = {
    "cofounder": 25,
    "projects": 20,
    "study_partner": 15,
    "accountability": 15,
    "helping_others": 10,
}

# (hours since last active, bonus), checked in order
RECENCY_TIERS: list[tuple[float, int]] = [
    (24.0, 15),
    (72.0, 10),
    (168.0, 5),
]


def shared_tag_count(viewer_tags: list[str], candidate_tags: list[str]) -> int:
    """Number of viewer tags that appear among the candidate's tags.

    Counted per viewer tag, so a tag listed both as an interest and as a
    skill counts twice.
    """
    candidate_lower = {t.lower() for t in candidate_tags}
    return sum(1 for t in viewer_tags if t.lower() in candidate_lower)


def open_to_bonus(viewer: OpenToFlags, candidate: OpenToFlags) -> int:
    return sum(
        points
        for flag, points in OPEN_TO_POINTS.items()
        if getattr(viewer, flag) and getattr(candidate, flag)
    )


def recency_bonus(last_active_at: datetime | None, now: datetime) -> int:
    if last_active_at is None:
        return 0
    hours = (now - last_active_at).total_seconds() / 3600.0
    for limit, bonus in RECENCY_TIERS:
        if hours < limit:
            return bonus
    return 0


def score_candidate(viewer: User, candidate: User, now: datetime) -> int:
    """Additive relevance score of ``candidate`` for ``viewer`` at ``now``."""
    score = SHARED_TAG_POINTS * shared_tag_count(viewer.tags, candidate.tags)

    if viewer.location and candidate.location:
        if viewer.location.lower() == candidate.location.lower():
            score += SAME_LOCATION_POINTS

    score += open_to_bonus(viewer.open_to, candidate.open_to)
    score += recency_bonus(candidate.last_active_at, now)

    if candidate.school_verified:
        score += VERIFIED_SCHOOL_POINTS

    return score


def rank_candidates(
    viewer: User,
    candidates: list[User],
    now: datetime,
    limit: int | None = None,
    offset: int = 0,
) -> list[User]:
    """Order ``candidates`` by descending score.

    Without ``limit`` the whole pool is sorted.  With ``limit`` only the top
    ``offset + limit`` are selected; ``heapq.nlargest`` is stable, so the
    page is identical to the matching slice of the full sort.
    """
    if offset < 0 or (limit is not None and limit < 0):
        raise InvalidInput("limit and offset must not be negative.")

    scored = [(score_candidate(viewer, c, now), c) for c in candidates]

    if limit is None:
        ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
    else:
        ranked = heapq.nlargest(offset + limit, scored, key=lambda pair: pair[0])

    return [candidate for _, candidate in ranked[offset:]]


class RankingService:
    """Produces the ordered swipe feed for a user."""

    def __init__(
        self,
        profile_store: ProfileStore | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.profile_store = profile_store or ProfileStore()
        self.clock = clock

    async def list_candidates(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[User]:
        """Return the users ``user_id`` may swipe on next, best first."""
        log = logger.bind(user_id=str(user_id))
        now = self.clock()

        viewer = await self.profile_store.get_user(user_id, db_session)
        if viewer is None:
            raise NotFound(f"User {user_id} not found.")

        excluded = await self.excluded_user_ids(user_id, now, db_session)
        pool = await self.profile_store.list_users(
            exclude_ids={user_id, *excluded},
            db_session=db_session,
        )

        ranked = rank_candidates(viewer, pool, now, limit=limit, offset=offset)

        log.info(
            "candidates_ranked",
            pool_size=len(pool),
            excluded=len(excluded),
            returned=len(ranked),
        )
        return ranked

    async def excluded_user_ids(
        self,
        user_id: uuid.UUID,
        now: datetime,
        db_session: AsyncSession,
    ) -> set[uuid.UUID]:
        """Users hidden from ``user_id``'s feed at ``now``."""
        stmt = select(SwipeRecord.swiped_id).where(
            SwipeRecord.swiper_id == user_id,
            or_(
                SwipeRecord.direction.in_(INTEREST_DIRECTIONS),
                and_(
                    SwipeRecord.direction == SwipeDirection.PASS.value,
                    SwipeRecord.expires_at > now,
                ),
            ),
        )
        result = await db_session.execute(stmt)
        return set(result.scalars().all())
