"""
Collabia — Match Materializer

Turns a mutual interest into the two records the rest of the product reads:

  * one ``Match`` row per unordered pair, keyed by the sorted ids
    (``user1_id < user2_id``), so "are these two matched" does not depend on
    who sent the original interest
  * one ``Conversation`` whose participants are exactly the pair

Both writes are idempotent.  Re-accepting, matching through the reverse
direction, or two accept requests racing each other all converge on the same
Match and the same Conversation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.clock import Clock, utcnow
from collabia.database import dialect_insert
from collabia.models.match import Conversation, Match
from collabia.models.user import User
from collabia.services.conversation_store import ConversationStore
from collabia.services.profile_store import ProfileStore

logger = structlog.get_logger("collabia.match_service")


@dataclass
class MaterializedMatch:
    """Everything the receiver needs to open the chat straight away."""

    match: Match
    conversation: Conversation
    other_user: User | None


@dataclass
class MatchEntry:
    match: Match
    user: User | None


def canonical_pair(a: uuid.UUID, b: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    """Order a pair lexicographically by id string."""
    first, second = sorted((a, b), key=str)
    return first, second


class MatchService:

    def __init__(
        self,
        conversation_store: ConversationStore | None = None,
        profile_store: ProfileStore | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.clock = clock
        self.conversation_store = conversation_store or ConversationStore(clock=clock)
        self.profile_store = profile_store or ProfileStore()

    async def materialize(
        self,
        sender_id: uuid.UUID,
        receiver_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> MaterializedMatch:
        """Ensure the pair has its Match and Conversation.

        ``other_user`` is the sender's profile, i.e. the party the accepting
        receiver is now connected to.
        """
        log = logger.bind(sender_id=str(sender_id), receiver_id=str(receiver_id))

        match = await self.upsert_match(sender_id, receiver_id, db_session)
        conversation = await self.conversation_store.get_or_create(
            [sender_id, receiver_id], db_session
        )
        other_user = await self.profile_store.get_user(sender_id, db_session)

        log.info(
            "match_materialized",
            match_id=str(match.id),
            conversation_id=str(conversation.id),
        )
        return MaterializedMatch(
            match=match,
            conversation=conversation,
            other_user=other_user,
        )

    async def upsert_match(
        self,
        a: uuid.UUID,
        b: uuid.UUID,
        db_session: AsyncSession,
    ) -> Match:
        """Insert the canonical Match for ``{a, b}`` unless it exists, and
        return the stored row."""
        user1_id, user2_id = canonical_pair(a, b)

        stmt = (
            dialect_insert(db_session, Match)
            .values(
                id=uuid.uuid4(),
                user1_id=user1_id,
                user2_id=user2_id,
                created_at=self.clock(),
            )
            .on_conflict_do_nothing(index_elements=["user1_id", "user2_id"])
        )
        await db_session.execute(stmt)

        result = await db_session.execute(
            select(Match).where(
                Match.user1_id == user1_id,
                Match.user2_id == user2_id,
            )
        )
        return result.scalar_one()

    async def list_matches(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> list[MatchEntry]:
        """Every match involving ``user_id``, newest first, with the other
        user's profile."""
        stmt = (
            select(Match)
            .where(or_(Match.user1_id == user_id, Match.user2_id == user_id))
            .order_by(Match.created_at.desc())
        )
        result = await db_session.execute(stmt)
        matches = list(result.scalars().all())

        users = await self.profile_store.get_users(
            (m.other_user_id(user_id) for m in matches), db_session
        )

        logger.info("user_matches_retrieved", user_id=str(user_id), count=len(matches))
        return [
            MatchEntry(match=m, user=users.get(m.other_user_id(user_id)))
            for m in matches
        ]
