"""
Collabia — Swipe Ledger

Records one student's directional action toward another and enforces the
two rules attached to it:

  * Daily quota: at most ``DAILY_SWIPE_LIMIT`` swipe records written per
    calendar day.  The check counts rows whose ``created_at`` falls after
    the day boundary; it is not atomic with the write, so a burst of
    concurrent requests can overshoot by one or two.  That is accepted.
  * Deny-list: a ``pass`` hides the candidate for ``DENY_LIST_DAYS``.
    Likes and superlikes never expire.

A swipe is an upsert on (swiper, swiped).  Re-swiping overwrites direction,
``created_at`` and ``expires_at`` rather than appending a second row.
Likes and superlikes also create or refresh the pending interest.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.clock import Clock, DayBoundary, local_start_of_day, utcnow
from collabia.config import get_settings
from collabia.database import dialect_insert
from collabia.exceptions import InvalidInput, NotFound, QuotaExceeded
from collabia.models.swipe import Interest, SwipeDirection, SwipeRecord
from collabia.services.interest_service import InterestService
from collabia.services.profile_store import ProfileStore

logger = structlog.get_logger("collabia.swipe_service")

_VALID_DIRECTIONS = {d.value for d in SwipeDirection}


@dataclass
class SwipeOutcome:
    record: SwipeRecord
    interest: Interest | None
    status: str  # "pending" when an interest was expressed, else "skipped"


@dataclass
class SwipeQuota:
    count: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)


class SwipeService:
    """Swipe ledger with daily quota and pass expiry.

    ``clock`` and ``start_of_day`` are injectable so that tests control the
    day boundary.
    """

    def __init__(
        self,
        interest_service: InterestService | None = None,
        profile_store: ProfileStore | None = None,
        clock: Clock = utcnow,
        start_of_day: DayBoundary = local_start_of_day,
    ) -> None:
        self.clock = clock
        self.start_of_day = start_of_day
        self.profile_store = profile_store or ProfileStore()
        self.interest_service = interest_service or InterestService(
            profile_store=self.profile_store, clock=clock
        )

        settings = get_settings()
        self.daily_limit: int = settings.DAILY_SWIPE_LIMIT
        self.deny_list_days: int = settings.DENY_LIST_DAYS

    # ── Public API ────────────────────────────────────────────────────────

    async def record_swipe(
        self,
        swiper_id: uuid.UUID,
        swiped_id: uuid.UUID,
        direction: str,
        db_session: AsyncSession,
    ) -> SwipeOutcome:
        """Record a swipe and, for likes, the matching interest.

        All checks run before the first write, so a rejected swipe leaves
        no trace.

        Raises
        ------
        InvalidInput
            Unknown direction, or a user swiping on themself.
        NotFound
            ``swiped_id`` is not a known user.
        QuotaExceeded
            The swiper already used today's quota.
        """
        log = logger.bind(
            swiper_id=str(swiper_id),
            swiped_id=str(swiped_id),
            direction=direction,
        )

        if direction not in _VALID_DIRECTIONS:
            raise InvalidInput("direction must be pass, like, or superlike")
        if swiper_id == swiped_id:
            raise InvalidInput("You cannot swipe on yourself.")

        target = await self.profile_store.get_user(swiped_id, db_session)
        if target is None:
            raise NotFound(f"User {swiped_id} not found.")

        now = self.clock()
        today_count = await self.get_today_count(swiper_id, db_session, now=now)
        if today_count >= self.daily_limit:
            log.info("swipe_quota_exceeded", count=today_count, limit=self.daily_limit)
            raise QuotaExceeded("Daily swipe limit reached.")

        record = await self._upsert_record(
            swiper_id=swiper_id,
            swiped_id=swiped_id,
            direction=direction,
            now=now,
            expires_at=self.expiry_for(direction, now),
            db_session=db_session,
        )

        interest: Interest | None = None
        if direction != SwipeDirection.PASS.value:
            interest = await self.interest_service.express_interest(
                sender_id=swiper_id,
                receiver_id=swiped_id,
                is_super_like=(direction == SwipeDirection.SUPERLIKE.value),
                db_session=db_session,
            )

        status = "pending" if interest is not None else "skipped"
        log.info("swipe_recorded", record_id=str(record.id), status=status)

        return SwipeOutcome(record=record, interest=interest, status=status)

    async def get_today_count(
        self,
        swiper_id: uuid.UUID,
        db_session: AsyncSession,
        now: datetime | None = None,
    ) -> int:
        """Number of swipe records written by ``swiper_id`` since the start of
        the current day."""
        day_start = self.start_of_day(now or self.clock())
        result = await db_session.execute(
            select(func.count())
            .select_from(SwipeRecord)
            .where(
                SwipeRecord.swiper_id == swiper_id,
                SwipeRecord.created_at >= day_start,
            )
        )
        return int(result.scalar_one())

    async def get_quota(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> SwipeQuota:
        count = await self.get_today_count(user_id, db_session)
        return SwipeQuota(count=count, limit=self.daily_limit)

    def expiry_for(self, direction: str, now: datetime) -> datetime | None:
        """Passes expire after the deny-list window; nothing else does."""
        if direction == SwipeDirection.PASS.value:
            return now + timedelta(days=self.deny_list_days)
        return None

    # ── Private helpers ───────────────────────────────────────────────────

    async def _upsert_record(
        self,
        swiper_id: uuid.UUID,
        swiped_id: uuid.UUID,
        direction: str,
        now: datetime,
        expires_at: datetime | None,
        db_session: AsyncSession,
    ) -> SwipeRecord:
        insert = dialect_insert(db_session, SwipeRecord)
        stmt = (
            insert.values(
                id=uuid.uuid4(),
                swiper_id=swiper_id,
                swiped_id=swiped_id,
                direction=direction,
                created_at=now,
                expires_at=expires_at,
            )
            .on_conflict_do_update(
                index_elements=["swiper_id", "swiped_id"],
                set_={
                    "direction": insert.excluded.direction,
                    "created_at": insert.excluded.created_at,
                    "expires_at": insert.excluded.expires_at,
                },
            )
            .returning(SwipeRecord)
        )
        result = await db_session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        return result.one()
