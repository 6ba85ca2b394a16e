from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class ChatRoomResponse(BaseModel):
    id: str
    match_id: str
    group_id1: str
    group_id2: str
    group1_name: str
    group2_name: str
    member_ids: List[str]
    created_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None
    last_message: Optional[str] = None

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    message: str


class MessageResponse(BaseModel):
    id: str
    chat_room_id: str
    sender_id: str
    sender_name: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class MessageCreatedResponse(BaseModel):
    id: str
