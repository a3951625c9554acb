from fastapi import APIRouter, BackgroundTasks, Depends

from zawaj.core.auth import get_current_user
from zawaj.models.user import User
from zawaj.schemas.swipe import (
    Admirer,
    LikedMeResponse,
    MatchOut,
    SwipeOut,
    SwipeRequest,
    SwipeResponse,
    UndoResponse,
)
from zawaj.schemas.user import UserPublic
from zawaj.services.chat_sync import ChatTransport, get_chat_transport, publish_events
from zawaj.services.profile_store import ProfileStore, get_store

from .service import list_admirers, record_swipe, undo_last_swipe

router = APIRouter(prefix="/swipes", tags=["swipes"])


@router.post("", response_model=SwipeResponse)
def swipe(
    payload: SwipeRequest,
    background_tasks: BackgroundTasks,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
    chat: ChatTransport = Depends(get_chat_transport),
):
    outcome = record_swipe(
        store,
        me,
        payload.to_user_id,
        payload.direction,
        payload.is_super_like,
    )
    if outcome.events:
        background_tasks.add_task(publish_events, chat, outcome.events)

    return SwipeResponse(
        swipe=SwipeOut.model_validate(outcome.swipe),
        match=MatchOut.model_validate(outcome.match) if outcome.match else None,
    )


@router.post("/undo", response_model=UndoResponse)
def swipe_undo(
    background_tasks: BackgroundTasks,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
    chat: ChatTransport = Depends(get_chat_transport),
):
    outcome = undo_last_swipe(store, me)
    if outcome.events:
        background_tasks.add_task(publish_events, chat, outcome.events)

    return UndoResponse(
        undone=True,
        swipe=SwipeOut.model_validate(outcome.swipe),
        match_deleted=outcome.match_deleted,
    )


@router.get("/liked-me", response_model=LikedMeResponse)
def liked_me(
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    entries = list_admirers(store, me)
    return LikedMeResponse(
        users=[
            Admirer(
                **UserPublic.model_validate(e.user).model_dump(),
                is_super_like=e.is_super_like,
                liked_at=e.liked_at,
            )
            for e in entries
        ]
    )
