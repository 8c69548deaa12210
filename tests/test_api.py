"""HTTP-level tests: routing, caller identity and error mapping."""
import uuid
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from collabia.api.deps import get_swipe_service
from collabia.database import get_db
from collabia.main import app
from collabia.services.swipe_service import SwipeService


@pytest.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def users(make_user, db_session):
    """Three committed users: alice, bob, carol."""
    created = {
        name: await make_user(name=name.title(), interests=["AI"])
        for name in ("alice", "bob", "carol")
    }
    await db_session.commit()
    return created


def _as(user) -> dict:
    return {"X-User-Id": str(user.id)}


async def _like(client, swiper, target, direction="like"):
    return await client.post(
        "/api/v1/swipes/",
        json={"swiped_id": str(target.id), "direction": direction},
        headers=_as(swiper),
    )


class TestHealth:

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestSwipeRoutes:

    @pytest.mark.asyncio
    async def test_caller_identity_required(self, client, users):
        response = await client.get("/api/v1/swipes/candidates")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_like_returns_pending_interest(self, client, users):
        response = await _like(client, users["alice"], users["bob"])

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["swipe"]["direction"] == "like"
        assert body["interest"]["receiver_id"] == str(users["bob"].id)

    @pytest.mark.asyncio
    async def test_candidates_exclude_liked_users(self, client, users):
        await _like(client, users["alice"], users["bob"])

        response = await client.get("/api/v1/swipes/candidates", headers=_as(users["alice"]))

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [str(users["carol"].id)]

    @pytest.mark.asyncio
    async def test_quota_endpoint(self, client, users):
        await _like(client, users["alice"], users["bob"], direction="pass")

        response = await client.get("/api/v1/swipes/quota", headers=_as(users["alice"]))

        assert response.status_code == 200
        assert response.json()["count"] == 1

    @pytest.mark.asyncio
    async def test_quota_exceeded_maps_to_429(self, client, users):
        with patch("collabia.services.swipe_service.get_settings") as mock:
            settings = MagicMock()
            settings.DAILY_SWIPE_LIMIT = 1
            settings.DENY_LIST_DAYS = 30
            mock.return_value = settings
            limited = SwipeService()
        app.dependency_overrides[get_swipe_service] = lambda: limited

        assert (await _like(client, users["alice"], users["bob"])).status_code == 201
        response = await _like(client, users["alice"], users["carol"])

        assert response.status_code == 429
        assert response.json()["error"] == "quota_exceeded"

    @pytest.mark.asyncio
    async def test_unknown_target_maps_to_404(self, client, users):
        response = await client.post(
            "/api/v1/swipes/",
            json={"swiped_id": str(uuid.uuid4()), "direction": "like"},
            headers=_as(users["alice"]),
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_bad_direction_maps_to_422(self, client, users):
        response = await _like(client, users["alice"], users["bob"], direction="wink")
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_input"


class TestInterestAndMatchRoutes:

    async def _received_interest_id(self, client, receiver) -> str:
        response = await client.get("/api/v1/interests/received", headers=_as(receiver))
        return response.json()[0]["interest_id"]

    @pytest.mark.asyncio
    async def test_accept_flow(self, client, users):
        alice, bob = users["alice"], users["bob"]
        await _like(client, alice, bob, direction="superlike")

        count = await client.get("/api/v1/interests/received/count", headers=_as(bob))
        assert count.json() == {"count": 1}

        interest_id = await self._received_interest_id(client, bob)
        response = await client.post(
            f"/api/v1/interests/{interest_id}/respond",
            json={"action": "accept"},
            headers=_as(bob),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["interest"]["status"] == "mutual"
        assert body["other_user"]["id"] == str(alice.id)
        assert sorted(body["conversation"]["participant_ids"]) == sorted([str(alice.id), str(bob.id)])

        matches = await client.get("/api/v1/matches/", headers=_as(bob))
        assert [m["user"]["id"] for m in matches.json()] == [str(alice.id)]

        new_count = await client.get("/api/v1/matches/new/count", headers=_as(alice))
        assert new_count.json() == {"count": 1}

        seen = await client.post("/api/v1/matches/new/seen", headers=_as(alice))
        assert seen.json()["updated"] == 1

        new_count = await client.get("/api/v1/matches/new/count", headers=_as(alice))
        assert new_count.json() == {"count": 0}

    @pytest.mark.asyncio
    async def test_second_respond_maps_to_409(self, client, users):
        alice, bob = users["alice"], users["bob"]
        await _like(client, alice, bob)
        interest_id = await self._received_interest_id(client, bob)
        url = f"/api/v1/interests/{interest_id}/respond"

        assert (await client.post(url, json={"action": "decline"}, headers=_as(bob))).status_code == 200
        response = await client.post(url, json={"action": "accept"}, headers=_as(bob))

        assert response.status_code == 409
        assert response.json()["error"] == "already_responded"

    @pytest.mark.asyncio
    async def test_sender_cannot_respond(self, client, users):
        alice, bob = users["alice"], users["bob"]
        await _like(client, alice, bob)
        interest_id = await self._received_interest_id(client, bob)

        response = await client.post(
            f"/api/v1/interests/{interest_id}/respond",
            json={"action": "accept"},
            headers=_as(alice),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_interest_status(self, client, users):
        alice, bob = users["alice"], users["bob"]
        await _like(client, alice, bob)

        response = await client.get(f"/api/v1/interests/status/{bob.id}", headers=_as(alice))

        assert response.json() == {
            "has_sent_interest": True,
            "status": "pending",
            "is_super_like": False,
        }


class TestDiscoveryRoutes:

    @pytest.mark.asyncio
    async def test_unknown_kind_maps_to_422(self, client, users):
        response = await client.get(
            "/api/v1/discovery/same-interests/movie",
            headers=_as(users["alice"]),
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_empty_groups(self, client, users):
        response = await client.get("/api/v1/discovery/same-interests", headers=_as(users["alice"]))
        assert response.status_code == 200
        assert response.json() == {"book": None, "game": None, "skill": None}
