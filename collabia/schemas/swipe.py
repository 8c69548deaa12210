from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional

from collabia.schemas.interest import InterestResponse


class SwipeCreate(BaseModel):
    swiped_id: UUID
    direction: str  # pass/like/superlike


class SwipeRecordResponse(BaseModel):
    id: UUID
    swiper_id: UUID
    swiped_id: UUID
    direction: str
    created_at: datetime
    expires_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SwipeResponse(BaseModel):
    swipe: SwipeRecordResponse
    interest: Optional[InterestResponse] = None
    status: str  # pending/skipped


class SwipeQuotaResponse(BaseModel):
    count: int
    limit: int
    remaining: int
