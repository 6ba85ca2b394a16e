from pydantic import BaseModel, Field
from typing import Optional


class ProfileUpdate(BaseModel):
    display_name: str = Field(min_length=1)
    photo_url: Optional[str] = None  # None or "" removes the photo from member records


class ProfileSyncResponse(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    groups_updated: int
