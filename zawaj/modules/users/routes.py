from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel, Field

from zawaj.core.auth import get_current_user
from zawaj.models.user import User
from zawaj.schemas.discovery import OkResponse
from zawaj.schemas.preference import PreferenceResponse, PreferenceUpdateRequest
from zawaj.schemas.user import (
    CompletenessOut,
    LocationUpdateRequest,
    PhotoOut,
    UserCreateRequest,
    UserMe,
    UserUpdateRequest,
)
from zawaj.services.chat_sync import ChatTransport, get_chat_transport, publish_events
from zawaj.services.profile_store import ProfileStore, get_store

from .service import (
    add_photo,
    create_user,
    delete_account,
    profile_completeness,
    update_location,
    update_preferences,
    update_profile,
)

router = APIRouter(prefix="/users", tags=["users"])


class PhotoCreateRequest(BaseModel):
    # already-hosted image; uploads go through the media service
    url: str = Field(..., min_length=1)


@router.post("", response_model=UserMe)
def user_create(
    payload: UserCreateRequest,
    store: ProfileStore = Depends(get_store),
):
    return UserMe.model_validate(create_user(store, payload))


@router.get("/me", response_model=UserMe)
def user_me(me: User = Depends(get_current_user)):
    return UserMe.model_validate(me)


@router.put("/me", response_model=UserMe)
def user_update(
    payload: UserUpdateRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return UserMe.model_validate(update_profile(store, me, payload))


@router.get("/me/completeness", response_model=CompletenessOut)
def user_completeness(me: User = Depends(get_current_user)):
    return CompletenessOut(completeness=profile_completeness(me))


@router.put("/me/preferences", response_model=PreferenceResponse)
def user_preferences(
    payload: PreferenceUpdateRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return PreferenceResponse.model_validate(update_preferences(store, me, payload))


@router.put("/me/location", response_model=UserMe)
def user_location(
    payload: LocationUpdateRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return UserMe.model_validate(update_location(store, me, payload.location))


@router.post("/me/photos", response_model=PhotoOut)
def user_photo(
    payload: PhotoCreateRequest,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
):
    return PhotoOut.model_validate(add_photo(store, me, payload.url))


@router.delete("/me", response_model=OkResponse)
def user_delete(
    background_tasks: BackgroundTasks,
    me: User = Depends(get_current_user),
    store: ProfileStore = Depends(get_store),
    chat: ChatTransport = Depends(get_chat_transport),
):
    events = delete_account(store, me)
    if events:
        background_tasks.add_task(publish_events, chat, events)
    return OkResponse()
