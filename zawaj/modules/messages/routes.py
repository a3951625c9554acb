from fastapi import APIRouter, Depends, Query

from zawaj.core.auth import get_current_user
from zawaj.core.match_config import DEFAULT_MESSAGE_PAGE, MAX_PAGE_LIMIT
from zawaj.models.user import User
from zawaj.schemas.match import MessageListResponse, MessageOut, MessageSendRequest
from zawaj.services.profile_store import ProfileStore, get_store

from .service import get_messages, send_message

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/{match_id}", response_model=MessageListResponse)
def message_list(
    match_id: str,
    limit: int = Query(DEFAULT_MESSAGE_PAGE, ge=1, le=MAX_PAGE_LIMIT),
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    msgs = get_messages(store, me, match_id, limit)
    return MessageListResponse(messages=[MessageOut.model_validate(m) for m in msgs])


@router.post("/{match_id}", response_model=MessageOut)
def message_send(
    match_id: str,
    payload: MessageSendRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return MessageOut.model_validate(send_message(store, me, match_id, payload.text))
