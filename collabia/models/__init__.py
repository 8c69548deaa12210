"""
Collabia — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from collabia.models.user import OpenToFlags, User
from collabia.models.swipe import (
    INTEREST_DIRECTIONS,
    Interest,
    InterestStatus,
    SwipeDirection,
    SwipeRecord,
)
from collabia.models.match import Conversation, ConversationParticipant, Match

__all__ = [
    "User",
    "OpenToFlags",
    "SwipeRecord",
    "SwipeDirection",
    "Interest",
    "InterestStatus",
    "INTEREST_DIRECTIONS",
    "Match",
    "Conversation",
    "ConversationParticipant",
]
