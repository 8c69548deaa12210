"""
Collabia — User model.

Profiles are owned by the profile service; the matching engine only reads
them.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import JSON, Boolean, String, Text, Uuid, false, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from collabia.database import Base, UtcDateTime

# Lists of free-text tags; JSONB on PostgreSQL, plain JSON elsewhere.
TagList = JSON().with_variant(JSONB(), "postgresql")


@dataclass(frozen=True)
class OpenToFlags:
    """What kind of collaboration a student is looking for."""

    study_partner: bool = False
    projects: bool = False
    accountability: bool = False
    cofounder: bool = False
    helping_others: bool = False


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(
        String, unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    school: Mapped[str | None] = mapped_column(String, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String, nullable=True)
    interests: Mapped[list | None] = mapped_column(TagList, nullable=True)
    skills: Mapped[list | None] = mapped_column(TagList, nullable=True)

    # ── Open-to flags ──────────────────────────────────────────────
    open_to_study_partner: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    open_to_projects: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    open_to_accountability: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    open_to_cofounder: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    open_to_helping_others: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    # ── Discovery fields ───────────────────────────────────────────
    current_book: Mapped[str | None] = mapped_column(String, nullable=True)
    current_game: Mapped[str | None] = mapped_column(String, nullable=True)
    current_skill: Mapped[str | None] = mapped_column(String, nullable=True)

    school_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    last_active_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )

    @property
    def open_to(self) -> OpenToFlags:
        return OpenToFlags(
            study_partner=bool(self.open_to_study_partner),
            projects=bool(self.open_to_projects),
            accountability=bool(self.open_to_accountability),
            cofounder=bool(self.open_to_cofounder),
            helping_others=bool(self.open_to_helping_others),
        )

    @property
    def tags(self) -> list[str]:
        """Interests followed by skills, duplicates kept."""
        return [*(self.interests or []), *(self.skills or [])]

    def __repr__(self) -> str:
        return f"<User {self.email!r} id={self.id}>"
