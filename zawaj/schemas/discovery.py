from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from zawaj.schemas.user import UserPublic


class DiscoveryCandidate(UserPublic):
    score: float
    distance_km: Optional[float] = None
    liked_you: bool = False
    super_liked_you: bool = False


class DiscoveryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: List[DiscoveryCandidate]
    page: int
    has_more: bool = Field(..., alias="hasMore")
    total: int


class SeenRequest(BaseModel):
    seen_user_id: str = Field(..., min_length=1)


class OkResponse(BaseModel):
    ok: bool = True
