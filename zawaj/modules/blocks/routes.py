from fastapi import APIRouter, Depends

from zawaj.core.auth import get_current_user
from zawaj.models.user import User
from zawaj.schemas.discovery import OkResponse
from zawaj.schemas.match import BlockOut, BlockRequest
from zawaj.services.profile_store import ProfileStore, get_store

from .service import block_user, unblock_user

router = APIRouter(prefix="/blocks", tags=["blocks"])


@router.post("", response_model=BlockOut)
def block(
    payload: BlockRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return BlockOut.model_validate(block_user(store, me, payload.target_user_id))


@router.delete("/{target_user_id}", response_model=OkResponse)
def unblock(
    target_user_id: str,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    unblock_user(store, me, target_user_id)
    return OkResponse()
