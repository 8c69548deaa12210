"""
Collabia — Interest State Machine

An interest is one student's one-sided "I'd like to collaborate" toward
another, keyed by the ordered (sender, receiver) pair:

    (none) --like/superlike--> pending --accept--> mutual
                                       --decline-> declined

A later like/superlike upserts the pair back to ``pending`` whatever its
current status, including ``declined``.  This mirrors how the product has
always behaved and is kept deliberately.

``seen_by_sender`` drives the "new match" badge: it is only flipped for
mutual interests, by the original sender.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from collabia.clock import Clock, utcnow
from collabia.database import dialect_insert
from collabia.exceptions import AlreadyResponded, Forbidden, InvalidInput, NotFound
from collabia.models.match import Conversation, Match
from collabia.models.swipe import Interest, InterestStatus
from collabia.models.user import User
from collabia.services.match_service import MatchService
from collabia.services.profile_store import ProfileStore

logger = structlog.get_logger("collabia.interest_service")

ACCEPT = "accept"
DECLINE = "decline"
_RESPONSE_STATUS: dict[str, str] = {
    ACCEPT: InterestStatus.MUTUAL.value,
    DECLINE: InterestStatus.DECLINED.value,
}


@dataclass
class InterestEntry:
    """An interest together with the profile on the other side of it."""

    interest: Interest
    user: User | None


@dataclass
class InterestLookup:
    has_sent_interest: bool
    status: str | None
    is_super_like: bool


@dataclass
class RespondResult:
    interest: Interest
    other_user: User | None
    match: Match | None = None
    conversation: Conversation | None = None


class InterestService:

    def __init__(
        self,
        match_service: MatchService | None = None,
        profile_store: ProfileStore | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.clock = clock
        self.profile_store = profile_store or ProfileStore()
        self.match_service = match_service or MatchService(
            profile_store=self.profile_store, clock=clock
        )

    # ── Transitions ──────────────────────────────────────────────────────

    async def express_interest(
        self,
        sender_id: uuid.UUID,
        receiver_id: uuid.UUID,
        is_super_like: bool,
        db_session: AsyncSession,
    ) -> Interest:
        """Create or refresh the pending interest from ``sender_id`` to
        ``receiver_id``.

        Single ``INSERT ... ON CONFLICT DO UPDATE`` on the pair key, so
        concurrent likes resolve to one row.  ``responded_at`` and
        ``seen_by_sender`` are left as they were.
        """
        now = self.clock()
        insert = dialect_insert(db_session, Interest)
        stmt = (
            insert.values(
                id=uuid.uuid4(),
                sender_id=sender_id,
                receiver_id=receiver_id,
                is_super_like=is_super_like,
                status=InterestStatus.PENDING.value,
                seen_by_sender=False,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=["sender_id", "receiver_id"],
                set_={
                    "is_super_like": insert.excluded.is_super_like,
                    "status": InterestStatus.PENDING.value,
                    "created_at": insert.excluded.created_at,
                    "updated_at": insert.excluded.updated_at,
                },
            )
            .returning(Interest)
        )
        result = await db_session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        interest = result.one()

        logger.info(
            "interest_expressed",
            interest_id=str(interest.id),
            sender_id=str(sender_id),
            receiver_id=str(receiver_id),
            is_super_like=is_super_like,
        )
        return interest

    async def respond(
        self,
        interest_id: uuid.UUID,
        responder_id: uuid.UUID,
        action: str,
        db_session: AsyncSession,
    ) -> RespondResult:
        """Accept or decline a received interest.

        Raises
        ------
        InvalidInput
            ``action`` is not ``accept`` or ``decline``.
        NotFound
            No interest with ``interest_id``.
        Forbidden
            ``responder_id`` is not the receiver.
        AlreadyResponded
            The interest is not pending, including when another request
            responded first.
        """
        log = logger.bind(interest_id=str(interest_id), responder_id=str(responder_id))

        new_status = _RESPONSE_STATUS.get(action)
        if new_status is None:
            raise InvalidInput("action must be accept or decline")

        interest = await db_session.get(Interest, interest_id)
        if interest is None:
            raise NotFound(f"Interest {interest_id} not found.")
        if interest.receiver_id != responder_id:
            log.warning("respond_forbidden")
            raise Forbidden("You can only respond to interests sent to you.")
        if interest.status != InterestStatus.PENDING.value:
            raise AlreadyResponded("Interest has already been responded to.")

        # Compare-and-swap on status so only one responder wins.
        result = await db_session.execute(
            update(Interest)
            .where(
                Interest.id == interest_id,
                Interest.status == InterestStatus.PENDING.value,
            )
            .values(status=new_status, responded_at=self.clock())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            log.info("respond_lost_race")
            raise AlreadyResponded("Interest has already been responded to.")

        await db_session.refresh(interest)

        if action == DECLINE:
            log.info("interest_declined")
            other_user = await self.profile_store.get_user(interest.sender_id, db_session)
            return RespondResult(interest=interest, other_user=other_user)

        materialized = await self.match_service.materialize(
            sender_id=interest.sender_id,
            receiver_id=interest.receiver_id,
            db_session=db_session,
        )
        log.info(
            "interest_accepted",
            match_id=str(materialized.match.id),
            conversation_id=str(materialized.conversation.id),
        )
        return RespondResult(
            interest=interest,
            other_user=materialized.other_user,
            match=materialized.match,
            conversation=materialized.conversation,
        )

    async def mark_seen(
        self,
        interest_id: uuid.UUID,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> Interest:
        """Mark one new match as seen by its sender.  Interests that are not
        mutual are returned unchanged."""
        interest = await db_session.get(Interest, interest_id)
        if interest is None:
            raise NotFound(f"Match {interest_id} not found.")
        if interest.sender_id != user_id:
            raise Forbidden("You can only mark your own matches as seen.")

        if interest.status == InterestStatus.MUTUAL.value and not interest.seen_by_sender:
            interest.seen_by_sender = True
            await db_session.flush()
            logger.info("match_marked_seen", interest_id=str(interest_id))

        return interest

    async def mark_all_seen(
        self,
        sender_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> int:
        """Mark every unseen mutual interest sent by ``sender_id`` as seen.
        Returns how many were updated."""
        result = await db_session.execute(
            update(Interest)
            .where(
                Interest.sender_id == sender_id,
                Interest.status == InterestStatus.MUTUAL.value,
                Interest.seen_by_sender.is_(False),
            )
            .values(seen_by_sender=True)
            .execution_options(synchronize_session=False)
        )
        logger.info("matches_marked_seen", sender_id=str(sender_id), count=result.rowcount)
        return result.rowcount

    # ── Queries ──────────────────────────────────────────────────────────

    async def list_received(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> list[InterestEntry]:
        """Pending interests sent to ``user_id``, newest first."""
        stmt = (
            select(Interest)
            .where(
                Interest.receiver_id == user_id,
                Interest.status == InterestStatus.PENDING.value,
            )
            .order_by(Interest.created_at.desc())
        )
        return await self._with_profiles(stmt, "sender_id", db_session)

    async def list_sent(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> list[InterestEntry]:
        """Pending interests ``user_id`` is waiting on, newest first."""
        stmt = (
            select(Interest)
            .where(
                Interest.sender_id == user_id,
                Interest.status == InterestStatus.PENDING.value,
            )
            .order_by(Interest.created_at.desc())
        )
        return await self._with_profiles(stmt, "receiver_id", db_session)

    async def list_new_matches(
        self,
        user_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> list[InterestEntry]:
        """Accepted interests ``user_id`` sent and has not seen yet, most
        recently accepted first."""
        stmt = (
            select(Interest)
            .where(*self._new_match_criteria(user_id))
            .order_by(Interest.responded_at.desc())
        )
        return await self._with_profiles(stmt, "receiver_id", db_session)

    async def get_status(
        self,
        user_id: uuid.UUID,
        target_id: uuid.UUID,
        db_session: AsyncSession,
    ) -> InterestLookup:
        """Has ``user_id`` already expressed interest in ``target_id``?"""
        result = await db_session.execute(
            select(Interest).where(
                Interest.sender_id == user_id,
                Interest.receiver_id == target_id,
            )
        )
        interest = result.scalar_one_or_none()
        if interest is None:
            return InterestLookup(has_sent_interest=False, status=None, is_super_like=False)
        return InterestLookup(
            has_sent_interest=True,
            status=interest.status,
            is_super_like=interest.is_super_like,
        )

    async def count_pending_received(self, user_id: uuid.UUID, db_session: AsyncSession) -> int:
        return await self._count(
            db_session,
            Interest.receiver_id == user_id,
            Interest.status == InterestStatus.PENDING.value,
        )

    async def count_pending_sent(self, user_id: uuid.UUID, db_session: AsyncSession) -> int:
        return await self._count(
            db_session,
            Interest.sender_id == user_id,
            Interest.status == InterestStatus.PENDING.value,
        )

    async def count_new_matches(self, user_id: uuid.UUID, db_session: AsyncSession) -> int:
        return await self._count(db_session, *self._new_match_criteria(user_id))

    # ── Private helpers ──────────────────────────────────────────────────

    @staticmethod
    def _new_match_criteria(user_id: uuid.UUID) -> tuple:
        return (
            Interest.sender_id == user_id,
            Interest.status == InterestStatus.MUTUAL.value,
            Interest.seen_by_sender.is_(False),
        )

    async def _count(self, db_session: AsyncSession, *criteria) -> int:
        result = await db_session.execute(
            select(func.count()).select_from(Interest).where(*criteria)
        )
        return int(result.scalar_one())

    async def _with_profiles(
        self,
        stmt,
        other_side: str,
        db_session: AsyncSession,
    ) -> list[InterestEntry]:
        result = await db_session.execute(stmt)
        interests = list(result.scalars().all())
        users = await self.profile_store.get_users(
            (getattr(i, other_side) for i in interests), db_session
        )
        return [
            InterestEntry(interest=i, user=users.get(getattr(i, other_side)))
            for i in interests
        ]
