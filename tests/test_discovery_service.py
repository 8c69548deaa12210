"""Tests for same-interest discovery (current book, game and skill)."""
import uuid
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from collabia.exceptions import InvalidInput, NotFound
from collabia.services.discovery_service import DiscoveryService


class TestSameInterests:

    @pytest.mark.asyncio
    async def test_groups_by_kind_case_insensitively(self, discovery_service, make_user, db_session):
        me = await make_user(current_book="The Lean Startup", current_game="Chess")
        reader = await make_user(name="Reader", current_book="the lean startup")
        await make_user(name="Player", current_game="Go")

        groups = await discovery_service.find_same_interests(me.id, db_session)

        assert groups["book"]["value"] == "The Lean Startup"
        assert [u.id for u in groups["book"]["users"]] == [reader.id]
        assert groups["game"] is None
        assert groups["skill"] is None

    @pytest.mark.asyncio
    async def test_most_recently_active_first(self, discovery_service, make_user, db_session, clock):
        me = await make_user(current_skill="Blender")
        stale = await make_user(name="Stale", current_skill="blender", last_active_at=clock.now - timedelta(days=9))
        fresh = await make_user(name="Fresh", current_skill="BLENDER", last_active_at=clock.now)

        group = await discovery_service.find_same_interest(me.id, "skill", db_session)

        assert [u.id for u in group["users"]] == [fresh.id, stale.id]

    @pytest.mark.asyncio
    async def test_blank_value_yields_empty_group(self, discovery_service, make_user, db_session):
        me = await make_user(current_game="   ")
        await make_user(current_game="   ")

        group = await discovery_service.find_same_interest(me.id, "game", db_session)
        assert group == {"value": None, "users": []}

        groups = await discovery_service.find_same_interests(me.id, db_session)
        assert groups == {"book": None, "game": None, "skill": None}

    @pytest.mark.asyncio
    async def test_group_limit_from_settings(self, make_user, db_session):
        with patch("collabia.services.discovery_service.get_settings") as mock:
            settings = MagicMock()
            settings.SAME_INTEREST_GROUP_LIMIT = 2
            mock.return_value = settings
            service = DiscoveryService()

        me = await make_user(current_book="Dune")
        for _ in range(4):
            await make_user(current_book="Dune")

        grouped = await service.find_same_interests(me.id, db_session)
        single = await service.find_same_interest(me.id, "book", db_session)

        assert len(grouped["book"]["users"]) == 2
        assert len(single["users"]) == 4

    @pytest.mark.asyncio
    async def test_unknown_kind(self, discovery_service, make_user, db_session):
        me = await make_user()
        with pytest.raises(InvalidInput):
            await discovery_service.find_same_interest(me.id, "movie", db_session)

    @pytest.mark.asyncio
    async def test_unknown_user(self, discovery_service, db_session):
        with pytest.raises(NotFound):
            await discovery_service.find_same_interests(uuid.uuid4(), db_session)
