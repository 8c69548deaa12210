from pydantic import BaseModel, field_validator
from uuid import UUID
from datetime import datetime
from typing import Optional


class UserProfile(BaseModel):
    id: UUID
    name: str
    email: str
    school: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    interests: list[str] = []
    skills: list[str] = []
    open_to_cofounder: bool = False
    open_to_projects: bool = False
    open_to_study_partner: bool = False
    open_to_accountability: bool = False
    open_to_helping_others: bool = False
    current_book: Optional[str] = None
    current_game: Optional[str] = None
    current_skill: Optional[str] = None
    last_active_at: Optional[datetime] = None
    school_verified: bool = False

    model_config = {"from_attributes": True}

    @field_validator("interests", "skills", mode="before")
    @classmethod
    def _missing_tags_are_empty(cls, v):
        return v or []


class SameInterestGroup(BaseModel):
    value: Optional[str] = None
    users: list[UserProfile] = []


class SameInterestsResponse(BaseModel):
    book: Optional[SameInterestGroup] = None
    game: Optional[SameInterestGroup] = None
    skill: Optional[SameInterestGroup] = None
