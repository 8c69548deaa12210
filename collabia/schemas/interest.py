from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional

from collabia.schemas.match import ConversationResponse, MatchResponse
from collabia.schemas.user import UserProfile


class InterestResponse(BaseModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    is_super_like: bool
    status: str  # pending/mutual/declined
    seen_by_sender: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InterestListItem(BaseModel):
    interest_id: UUID
    is_super_like: bool
    created_at: datetime
    user: Optional[UserProfile] = None


class RespondRequest(BaseModel):
    action: str  # accept/decline


class RespondResponse(BaseModel):
    interest: InterestResponse
    conversation: Optional[ConversationResponse] = None
    match: Optional[MatchResponse] = None
    other_user: Optional[UserProfile] = None


class InterestStatusResponse(BaseModel):
    has_sent_interest: bool
    status: Optional[str] = None
    is_super_like: bool = False


class CountResponse(BaseModel):
    count: int


class MarkSeenResponse(BaseModel):
    success: bool
    interest: Optional[InterestResponse] = None
    updated: Optional[int] = None
