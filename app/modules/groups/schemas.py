from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


class GroupMember(BaseModel):
    user_id: str
    name: str
    bio: Optional[str] = None
    photo_url: Optional[str] = None


class GroupCreate(BaseModel):
    name: str = Field(min_length=1)
    bio: str = Field(min_length=1)
    photo_url: Optional[str] = None
    members: List[GroupMember] = []

    @field_validator("name", "bio")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    bio: str = ""
    photo_url: Optional[str] = None
    created_by: str
    members: List[GroupMember] = []
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def has_member(self, user_id: str) -> bool:
        return any(m.user_id == user_id for m in self.members)


class GroupCreatedResponse(BaseModel):
    id: str


class GroupMemberAdd(BaseModel):
    user_id: str
    name: str
    bio: Optional[str] = None
    photo_url: Optional[str] = None


class CreatorProfile(BaseModel):
    """Identity of a user as supplied by the identity provider."""
    user_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
