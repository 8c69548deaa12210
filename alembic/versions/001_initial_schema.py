"""Initial schema — users, swipe ledger, interests, matches, conversations.

Revision ID: 001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _user_fk(name: str, **kwargs) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        **kwargs,
    )


def upgrade() -> None:
    # ── 1. users ────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String, unique=True, index=True, nullable=False),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("school", sa.String, nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("location", sa.String, nullable=True),
        sa.Column("interests", postgresql.JSONB, nullable=True),
        sa.Column("skills", postgresql.JSONB, nullable=True),
        sa.Column("open_to_study_partner", sa.Boolean, server_default="false", nullable=False),
        sa.Column("open_to_projects", sa.Boolean, server_default="false", nullable=False),
        sa.Column("open_to_accountability", sa.Boolean, server_default="false", nullable=False),
        sa.Column("open_to_cofounder", sa.Boolean, server_default="false", nullable=False),
        sa.Column("open_to_helping_others", sa.Boolean, server_default="false", nullable=False),
        sa.Column("current_book", sa.String, nullable=True),
        sa.Column("current_game", sa.String, nullable=True),
        sa.Column("current_skill", sa.String, nullable=True),
        sa.Column("school_verified", sa.Boolean, server_default="false", nullable=False),
        sa.Column(
            "last_active_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # ── 2. swipes (one row per ordered pair) ────────────────────────
    op.create_table(
        "swipes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _user_fk("swiper_id"),
        _user_fk("swiped_id"),
        sa.Column(
            "direction",
            sa.String,
            nullable=False,
            comment="pass / like / superlike",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "expires_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="Set for passes only",
        ),
        sa.UniqueConstraint("swiper_id", "swiped_id", name="uq_swipe_pair"),
    )
    op.create_index(
        "ix_swipes_swiper_created",
        "swipes",
        ["swiper_id", "created_at"],
    )

    # ── 3. interests ────────────────────────────────────────────────
    op.create_table(
        "interests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _user_fk("sender_id", index=True),
        _user_fk("receiver_id", index=True),
        sa.Column("is_super_like", sa.Boolean, server_default="false", nullable=False),
        sa.Column(
            "status",
            sa.String,
            server_default="pending",
            nullable=False,
            comment="pending / mutual / declined",
        ),
        sa.Column("seen_by_sender", sa.Boolean, server_default="false", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("sender_id", "receiver_id", name="uq_interest_pair"),
    )

    # ── 4. matches (canonical user1_id < user2_id) ──────────────────
    op.create_table(
        "matches",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _user_fk("user1_id"),
        _user_fk("user2_id"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("user1_id", "user2_id", name="uq_match_pair"),
    )

    # ── 5. conversations ────────────────────────────────────────────
    op.create_table(
        "conversations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "participant_key",
            sa.String,
            unique=True,
            nullable=False,
            comment="Sorted participant ids joined with ':'",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # ── 6. conversation_participants ────────────────────────────────
    op.create_table(
        "conversation_participants",
        sa.Column(
            "conversation_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("conversation_participants")
    op.drop_table("conversations")
    op.drop_table("matches")
    op.drop_table("interests")
    op.drop_index("ix_swipes_swiper_created", table_name="swipes")
    op.drop_table("swipes")
    op.drop_table("users")
