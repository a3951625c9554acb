from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from zawaj.schemas.base import BaseSchema, TimestampedSchema
from zawaj.schemas.enums import SwipeDirection
from zawaj.schemas.user import UserPublic


class SwipeRequest(BaseModel):
    to_user_id: str = Field(..., min_length=1)
    direction: SwipeDirection
    is_super_like: bool = False


class SwipeOut(TimestampedSchema):
    id: int
    from_user_id: str
    to_user_id: str
    direction: SwipeDirection
    is_super_like: bool


class MatchOut(BaseSchema):
    id: str
    user_a_id: str
    user_b_id: str
    roles_snapshot: Optional[str] = None
    created_at: datetime
    last_message_at: Optional[datetime] = None


class SwipeResponse(BaseModel):
    swipe: SwipeOut
    match: Optional[MatchOut] = None


class UndoResponse(BaseModel):
    undone: bool
    swipe: SwipeOut
    match_deleted: bool


class Admirer(UserPublic):
    is_super_like: bool
    liked_at: datetime


class LikedMeResponse(BaseModel):
    users: List[Admirer]
