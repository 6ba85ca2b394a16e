from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class MatchResponse(BaseModel):
    id: str
    group_id1: str
    group_id2: str
    matched_at: datetime

    class Config:
        from_attributes = True

    def other_group_id(self, group_id: str) -> str:
        return self.group_id2 if self.group_id1 == group_id else self.group_id1


class MatchDetailResponse(BaseModel):
    """A match seen from one of its groups, with the other group and the chat room resolved"""
    id: str
    matched_at: datetime
    your_group_id: str
    matched_group: Optional[dict] = None
    chat_room_id: Optional[str] = None
