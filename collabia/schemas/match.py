from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional

from collabia.schemas.user import UserProfile


class ConversationResponse(BaseModel):
    id: UUID
    participant_ids: list[UUID]
    created_at: datetime

    model_config = {"from_attributes": True}


class MatchResponse(BaseModel):
    id: UUID
    user1_id: UUID
    user2_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class MatchListItem(BaseModel):
    match_id: UUID
    matched_at: datetime
    user: Optional[UserProfile] = None


class NewMatchItem(BaseModel):
    interest_id: UUID
    matched_at: Optional[datetime] = None
    user: Optional[UserProfile] = None
