"""Tests for the swipe ledger: daily quota, pass expiry and swipe upserts."""
import uuid
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import func, select

from collabia.exceptions import InvalidInput, NotFound, QuotaExceeded
from collabia.models.swipe import Interest, SwipeRecord
from collabia.services.swipe_service import SwipeQuota, SwipeService


async def _count(db_session, model, *criteria) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(model).where(*criteria)
    )
    return result.scalar_one()


class TestDailyQuota:
    """At most ``DAILY_SWIPE_LIMIT`` swipes per calendar day."""

    @pytest.mark.asyncio
    async def test_swipe_after_limit_is_rejected_without_write(
        self, swipe_service, make_user, db_session
    ):
        swiper = await make_user()
        targets = [await make_user() for _ in range(swipe_service.daily_limit + 1)]

        for target in targets[:-1]:
            await swipe_service.record_swipe(swiper.id, target.id, "pass", db_session)

        with pytest.raises(QuotaExceeded):
            await swipe_service.record_swipe(swiper.id, targets[-1].id, "like", db_session)

        assert await swipe_service.get_today_count(swiper.id, db_session) == swipe_service.daily_limit
        assert await _count(db_session, SwipeRecord, SwipeRecord.swiped_id == targets[-1].id) == 0
        assert await _count(db_session, Interest, Interest.receiver_id == targets[-1].id) == 0

    @pytest.mark.asyncio
    async def test_all_directions_count_toward_quota(self, swipe_service, make_user, db_session):
        swiper = await make_user()
        for direction in ("pass", "like", "superlike"):
            target = await make_user()
            await swipe_service.record_swipe(swiper.id, target.id, direction, db_session)

        assert await swipe_service.get_today_count(swiper.id, db_session) == 3

    @pytest.mark.asyncio
    async def test_quota_resets_on_next_day(self, swipe_service, make_user, db_session, clock):
        swiper = await make_user()
        for _ in range(swipe_service.daily_limit):
            target = await make_user()
            await swipe_service.record_swipe(swiper.id, target.id, "pass", db_session)

        clock.advance(days=1)
        assert await swipe_service.get_today_count(swiper.id, db_session) == 0

        late = await make_user()
        outcome = await swipe_service.record_swipe(swiper.id, late.id, "like", db_session)
        assert outcome.status == "pending"

    @pytest.mark.asyncio
    async def test_reswipe_same_target_does_not_add_a_row(self, swipe_service, make_user, db_session):
        swiper = await make_user()
        target = await make_user()

        await swipe_service.record_swipe(swiper.id, target.id, "pass", db_session)
        await swipe_service.record_swipe(swiper.id, target.id, "like", db_session)

        assert await swipe_service.get_today_count(swiper.id, db_session) == 1

    @pytest.mark.asyncio
    async def test_reswipe_is_rejected_once_quota_is_used(self, swipe_service, make_user, db_session):
        swiper = await make_user()
        targets = [await make_user() for _ in range(swipe_service.daily_limit)]
        for target in targets:
            await swipe_service.record_swipe(swiper.id, target.id, "pass", db_session)

        with pytest.raises(QuotaExceeded):
            await swipe_service.record_swipe(swiper.id, targets[0].id, "like", db_session)

    @pytest.mark.asyncio
    async def test_get_quota_reports_remaining(self, swipe_service, make_user, db_session):
        swiper = await make_user()
        target = await make_user()
        await swipe_service.record_swipe(swiper.id, target.id, "like", db_session)

        quota = await swipe_service.get_quota(swiper.id, db_session)

        assert quota.count == 1
        assert quota.limit == swipe_service.daily_limit
        assert quota.remaining == swipe_service.daily_limit - 1

    def test_remaining_never_negative(self):
        assert SwipeQuota(count=35, limit=30).remaining == 0

    @pytest.mark.asyncio
    async def test_limit_comes_from_settings(self, make_user, db_session, interest_service, clock):
        with patch("collabia.services.swipe_service.get_settings") as mock:
            settings = MagicMock()
            settings.DAILY_SWIPE_LIMIT = 2
            settings.DENY_LIST_DAYS = 7
            mock.return_value = settings
            service = SwipeService(interest_service=interest_service, clock=clock)

        swiper = await make_user()
        for _ in range(2):
            target = await make_user()
            await service.record_swipe(swiper.id, target.id, "pass", db_session)

        with pytest.raises(QuotaExceeded):
            await service.record_swipe(swiper.id, (await make_user()).id, "pass", db_session)
        assert service.expiry_for("pass", clock.now) == clock.now + timedelta(days=7)


class TestSwipeRecords:
    """Upsert semantics, expiry and the interest side effect."""

    @pytest.mark.asyncio
    async def test_pass_expires_after_deny_list_window(self, swipe_service, make_user, db_session, clock):
        swiper = await make_user()
        target = await make_user()

        outcome = await swipe_service.record_swipe(swiper.id, target.id, "pass", db_session)

        assert outcome.record.direction == "pass"
        assert outcome.record.expires_at == clock.now + timedelta(days=30)
        assert outcome.interest is None
        assert outcome.status == "skipped"

    @pytest.mark.asyncio
    async def test_like_never_expires_and_creates_interest(
        self, swipe_service, make_user, db_session
    ):
        swiper = await make_user()
        target = await make_user()

        outcome = await swipe_service.record_swipe(swiper.id, target.id, "like", db_session)

        assert outcome.record.expires_at is None
        assert outcome.status == "pending"
        assert outcome.interest.sender_id == swiper.id
        assert outcome.interest.receiver_id == target.id
        assert outcome.interest.status == "pending"
        assert outcome.interest.is_super_like is False

    @pytest.mark.asyncio
    async def test_superlike_flags_interest(self, swipe_service, make_user, db_session):
        swiper = await make_user()
        target = await make_user()

        outcome = await swipe_service.record_swipe(swiper.id, target.id, "superlike", db_session)

        assert outcome.interest.is_super_like is True

    @pytest.mark.asyncio
    async def test_reswipe_overwrites_direction_and_timestamps(
        self, swipe_service, make_user, db_session, clock
    ):
        swiper = await make_user()
        target = await make_user()

        first = await swipe_service.record_swipe(swiper.id, target.id, "pass", db_session)
        clock.advance(hours=3)
        second = await swipe_service.record_swipe(swiper.id, target.id, "like", db_session)

        assert second.record.id == first.record.id
        assert second.record.direction == "like"
        assert second.record.created_at == clock.now
        assert second.record.expires_at is None
        assert await _count(db_session, SwipeRecord, SwipeRecord.swiper_id == swiper.id) == 1

    @pytest.mark.asyncio
    async def test_unknown_direction_rejected(self, swipe_service, make_user, db_session):
        swiper = await make_user()
        target = await make_user()

        with pytest.raises(InvalidInput):
            await swipe_service.record_swipe(swiper.id, target.id, "block", db_session)
        assert await _count(db_session, SwipeRecord) == 0

    @pytest.mark.asyncio
    async def test_self_swipe_rejected(self, swipe_service, make_user, db_session):
        swiper = await make_user()

        with pytest.raises(InvalidInput):
            await swipe_service.record_swipe(swiper.id, swiper.id, "like", db_session)
        assert await _count(db_session, SwipeRecord) == 0

    @pytest.mark.asyncio
    async def test_unknown_target_not_found(self, swipe_service, make_user, db_session):
        swiper = await make_user()

        with pytest.raises(NotFound):
            await swipe_service.record_swipe(swiper.id, uuid.uuid4(), "like", db_session)
        assert await _count(db_session, SwipeRecord) == 0
