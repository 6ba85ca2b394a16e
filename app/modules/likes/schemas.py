from pydantic import BaseModel
from typing import Optional


class LikeCreate(BaseModel):
    from_group_id: str
    to_group_id: str


class LikeResult(BaseModel):
    liked: bool = True
    matched: bool
    match_id: Optional[str] = None
