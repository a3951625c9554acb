from typing import Optional

from fastapi import APIRouter, Depends, Query

from zawaj.core.auth import get_current_user
from zawaj.core.match_config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from zawaj.models.user import User
from zawaj.schemas.discovery import (
    DiscoveryCandidate,
    DiscoveryResponse,
    OkResponse,
    SeenRequest,
)
from zawaj.schemas.user import UserPublic
from zawaj.services.profile_store import ProfileStore, get_store

from .scoring import ScoredCandidate
from .service import discover, mark_seen, parse_exclude_ids

router = APIRouter(prefix="/discovery", tags=["discovery"])


def _candidate_out(c: ScoredCandidate) -> DiscoveryCandidate:
    card = UserPublic.model_validate(c.user).model_dump()
    return DiscoveryCandidate(
        **card,
        score=round(c.score, 3),
        distance_km=c.distance_km,
        liked_you=c.liked_you,
        super_liked_you=c.super_liked_you,
    )


@router.get("", response_model=DiscoveryResponse)
def discovery_deck(
    page: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    exclude_ids: Optional[str] = Query(None, description="comma separated ids shown this session"),
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    result = discover(store, me, page, limit, parse_exclude_ids(exclude_ids))

    users = [_candidate_out(c) for c in result.candidates]
    return DiscoveryResponse(
        users=users,
        page=result.page,
        has_more=result.has_more,
        total=result.total,
    )


@router.post("/seen", response_model=OkResponse)
def discovery_seen(
    payload: SeenRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    mark_seen(store, me, payload.seen_user_id)
    return OkResponse()
