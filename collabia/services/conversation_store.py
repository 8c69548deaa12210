"""
Collabia — Conversation lookup and creation.

Messaging itself lives elsewhere.  The matching engine only needs to make
sure that two matched students share exactly one conversation, so a
conversation is identified by its sorted participant set
(``participant_key``), which carries a unique constraint.
"""

from __future__ import annotations

import uuid
from typing import Iterable

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.clock import Clock, utcnow
from collabia.database import dialect_insert
from collabia.exceptions import InvalidInput
from collabia.models.match import Conversation, ConversationParticipant

logger = structlog.get_logger("collabia.conversation_store")


def participant_key(participant_ids: Iterable[uuid.UUID]) -> str:
    """Canonical key for an unordered participant set."""
    ids = sorted({str(pid) for pid in participant_ids})
    if len(ids) < 2:
        raise InvalidInput("A conversation needs at least two distinct participants.")
    return ":".join(ids)


class ConversationStore:

    def __init__(self, clock: Clock = utcnow) -> None:
        self.clock = clock

    async def find_conversation(
        self,
        participant_ids: Iterable[uuid.UUID],
        db_session: AsyncSession,
    ) -> Conversation | None:
        """Return the conversation whose participants are exactly
        ``participant_ids``, or ``None``."""
        key = participant_key(participant_ids)
        result = await db_session.execute(
            select(Conversation).where(Conversation.participant_key == key)
        )
        return result.scalar_one_or_none()

    async def create_conversation(
        self,
        participant_ids: Iterable[uuid.UUID],
        db_session: AsyncSession,
    ) -> Conversation:
        """Create the conversation for ``participant_ids``.

        The insert is ``ON CONFLICT DO NOTHING`` on the participant key, so
        two requests racing to create the same conversation both end up
        with the one row that won.
        """
        ids = sorted(set(participant_ids), key=str)
        key = participant_key(ids)

        stmt = (
            dialect_insert(db_session, Conversation)
            .values(id=uuid.uuid4(), participant_key=key, created_at=self.clock())
            .on_conflict_do_nothing(index_elements=["participant_key"])
        )
        await db_session.execute(stmt)

        conversation_id = (
            await db_session.execute(
                select(Conversation.id).where(Conversation.participant_key == key)
            )
        ).scalar_one()

        members = (
            dialect_insert(db_session, ConversationParticipant)
            .values([
                {"conversation_id": conversation_id, "user_id": uid} for uid in ids
            ])
            .on_conflict_do_nothing(index_elements=["conversation_id", "user_id"])
        )
        await db_session.execute(members)

        conversation = await self._load(key, db_session)

        logger.info(
            "conversation_created",
            conversation_id=str(conversation.id),
            participants=[str(uid) for uid in ids],
        )
        return conversation

    async def get_or_create(
        self,
        participant_ids: Iterable[uuid.UUID],
        db_session: AsyncSession,
    ) -> Conversation:
        """Reuse the participants' conversation if there is one, otherwise
        create it."""
        ids = list(participant_ids)
        existing = await self.find_conversation(ids, db_session)
        if existing is not None:
            logger.debug("conversation_reused", conversation_id=str(existing.id))
            return existing
        return await self.create_conversation(ids, db_session)

    async def _load(self, key: str, db_session: AsyncSession) -> Conversation:
        result = await db_session.execute(
            select(Conversation)
            .where(Conversation.participant_key == key)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
