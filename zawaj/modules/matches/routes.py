from fastapi import APIRouter, BackgroundTasks, Depends

from zawaj.core.auth import get_current_user
from zawaj.models.user import User
from zawaj.schemas.discovery import OkResponse
from zawaj.schemas.match import MatchDetail, MatchListResponse
from zawaj.services.chat_sync import ChatTransport, get_chat_transport, publish_events
from zawaj.services.profile_store import ProfileStore, get_store

from .service import get_match_for, list_matches, unmatch

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("", response_model=MatchListResponse)
def match_list(
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    matches = list_matches(store, me)
    return MatchListResponse(matches=[MatchDetail.model_validate(m) for m in matches])


@router.get("/{match_id}", response_model=MatchDetail)
def match_detail(
    match_id: str,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return MatchDetail.model_validate(get_match_for(store, me, match_id))


@router.delete("/{match_id}", response_model=OkResponse)
def match_delete(
    match_id: str,
    background_tasks: BackgroundTasks,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
    chat: ChatTransport = Depends(get_chat_transport),
):
    event = unmatch(store, me, match_id)
    background_tasks.add_task(publish_events, chat, [event])
    return OkResponse()
