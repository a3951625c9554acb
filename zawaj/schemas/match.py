from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from zawaj.core.match_config import MAX_MESSAGE_LENGTH
from zawaj.schemas.base import BaseSchema
from zawaj.schemas.swipe import MatchOut
from zawaj.schemas.user import UserPublic


class MatchDetail(MatchOut):
    user_a: UserPublic
    user_b: UserPublic


class MatchListResponse(BaseModel):
    matches: List[MatchDetail]


# ---------- messages ----------
class MessageSendRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)


class MessageOut(BaseSchema):
    id: int
    match_id: str
    sender_id: str
    text: str
    created_at: datetime


class MessageListResponse(BaseModel):
    messages: List[MessageOut]


# ---------- blocks ----------
class BlockRequest(BaseModel):
    target_user_id: str = Field(..., min_length=1)


class BlockOut(BaseSchema):
    id: str
    blocker_id: str
    blocked_id: str
    created_at: datetime
