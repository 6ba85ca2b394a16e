from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

JoinRequestStatus = Literal["pending", "approved", "rejected"]


class JoinRequestResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    user_name: str
    user_email: Optional[str] = None
    user_photo_url: Optional[str] = None
    status: JoinRequestStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JoinRequestCreatedResponse(BaseModel):
    id: str
