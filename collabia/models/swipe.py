"""
Collabia — Swipe ledger and interest models.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from collabia.database import Base, UtcDateTime


class SwipeDirection(str, enum.Enum):
    PASS = "pass"
    LIKE = "like"
    SUPERLIKE = "superlike"


class InterestStatus(str, enum.Enum):
    PENDING = "pending"
    MUTUAL = "mutual"
    DECLINED = "declined"


INTEREST_DIRECTIONS = (SwipeDirection.LIKE.value, SwipeDirection.SUPERLIKE.value)


class SwipeRecord(Base):
    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipe_pair"),
        Index("ix_swipes_swiper_created", "swiper_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    swiper_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    swiped_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    direction: Mapped[str] = mapped_column(
        String, nullable=False, comment="pass / like / superlike"
    )
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        UtcDateTime, nullable=True, comment="Set for passes only"
    )

    def __repr__(self) -> str:
        return f"<SwipeRecord {self.swiper_id} -> {self.swiped_id} dir={self.direction!r}>"


class Interest(Base):
    __tablename__ = "interests"
    __table_args__ = (
        UniqueConstraint("sender_id", "receiver_id", name="uq_interest_pair"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    receiver_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_super_like: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String,
        default=InterestStatus.PENDING.value,
        server_default=InterestStatus.PENDING.value,
        nullable=False,
        comment="pending / mutual / declined",
    )
    seen_by_sender: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Interest {self.sender_id} -> {self.receiver_id} "
            f"status={self.status!r}>"
        )
