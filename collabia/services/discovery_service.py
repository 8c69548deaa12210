"""
Collabia — Same-interest discovery.

Surfaces other students reading the same book, playing the same game or
learning the same skill as the caller.  Values are compared
case-insensitively and the most recently active students come first.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.config import get_settings
from collabia.exceptions import InvalidInput, NotFound
from collabia.models.user import User
from collabia.services.profile_store import ProfileStore

logger = structlog.get_logger("collabia.discovery_service")

INTEREST_KINDS: dict[str, str] = {
    "book": "current_book",
    "game": "current_game",
    "skill": "current_skill",
}


class DiscoveryService:

    def __init__(self, profile_store: ProfileStore | None = None) -> None:
        self.profile_store = profile_store or ProfileStore()
        self.group_limit: int = get_settings().SAME_INTEREST_GROUP_LIMIT

    async def find_same_interests(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> dict[str, dict | None]:
        """Group other users by the caller's current book, game and skill.

        Returns ``{"book": {"value", "users"} | None, "game": ..., "skill": ...}``.
        A group is ``None`` when the caller has no value for it or nobody
        else shares it.  Each group holds at most ``group_limit`` users.
        """
        user = await self._get_user(user_id, db_session)

        groups: dict[str, dict | None] = {}
        for kind, field in INTEREST_KINDS.items():
            value = _clean(getattr(user, field))
            if value is None:
                groups[kind] = None
                continue

            users = await self._users_sharing(
                user_id, field, value, db_session, limit=self.group_limit
            )
            groups[kind] = {"value": value, "users": users} if users else None

        logger.info(
            "same_interests_found",
            user_id=str(user_id),
            groups=[k for k, v in groups.items() if v is not None],
        )
        return groups

    async def find_same_interest(
        self,
        user_id: uuid.UUID,
        kind: str,
        db_session: AsyncSession,
    ) -> dict:
        """Every user sharing the caller's value for one ``kind``
        (``book``, ``game`` or ``skill``)."""
        field = INTEREST_KINDS.get(kind)
        if field is None:
            raise InvalidInput("Type must be book, game, or skill")

        user = await self._get_user(user_id, db_session)
        value = _clean(getattr(user, field))
        if value is None:
            return {"value": None, "users": []}

        users = await self._users_sharing(user_id, field, value, db_session)
        return {"value": value, "users": users}

    # ── Private helpers ──────────────────────────────────────────────────

    async def _get_user(self, user_id: uuid.UUID, db_session: AsyncSession) -> User:
        user = await self.profile_store.get_user(user_id, db_session)
        if user is None:
            raise NotFound(f"User {user_id} not found.")
        return user

    async def _users_sharing(
        self,
        user_id: uuid.UUID,
        field: str,
        value: str,
        db_session: AsyncSession,
        limit: int | None = None,
    ) -> list[User]:
        column = getattr(User, field)
        stmt = (
            select(User)
            .where(User.id != user_id, func.lower(column) == value.lower())
            .order_by(User.last_active_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await db_session.execute(stmt)
        return list(result.scalars().all())


def _clean(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
