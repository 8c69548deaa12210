"""
Collabia — Read-only access to student profiles.

The matching engine never writes to ``users``; everything it needs from a
profile goes through this store.
"""

from __future__ import annotations

import uuid
from typing import Iterable

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.models.user import User

logger = structlog.get_logger("collabia.profile_store")


class ProfileStore:
    """Lookup and candidate-pool queries over the ``users`` table."""

    async def get_user(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> User | None:
        return await db_session.get(User, user_id)

    async def get_users(
        self,
        user_ids: Iterable[uuid.UUID],
        db_session: AsyncSession,
    ) -> dict[uuid.UUID, User]:
        """Fetch several users at once, keyed by id.  Unknown ids are
        simply absent from the result."""
        ids = list(set(user_ids))
        if not ids:
            return {}

        result = await db_session.execute(select(User).where(User.id.in_(ids)))
        return {u.id: u for u in result.scalars().all()}

    async def list_users(
        self,
        exclude_ids: Iterable[uuid.UUID],
        db_session: AsyncSession,
    ) -> list[User]:
        """Return every user not in ``exclude_ids``.

        Rows come back oldest account first; callers rely on this order being
        stable between requests when they break ties.
        """
        excluded = list(set(exclude_ids))
        stmt = select(User).order_by(User.created_at, User.id)
        if excluded:
            stmt = stmt.where(User.id.not_in(excluded))

        result = await db_session.execute(stmt)
        users = list(result.scalars().all())

        logger.debug("candidate_pool_loaded", size=len(users), excluded=len(excluded))
        return users
