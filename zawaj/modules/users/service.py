import json
from typing import List

from loguru import logger
from sqlalchemy.exc import IntegrityError

from zawaj.core.errors import Conflict, InvalidAccountState, ValidationFailed
from zawaj.core.match_config import COMPLETENESS_PHOTO_WEIGHT, COMPLETENESS_WEIGHTS
from zawaj.models.preference import Preference
from zawaj.models.user import Photo, User
from zawaj.schemas.preference import PreferenceUpdateRequest
from zawaj.modules.discovery.eligibility import parse_persona
from zawaj.schemas.enums import Role
from zawaj.schemas.user import GeoPoint, UserCreateRequest, UserUpdateRequest
from zawaj.services.chat_sync import MatchDeleted
from zawaj.services.profile_store import ProfileStore


def create_user(store: ProfileStore, payload: UserCreateRequest) -> User:
    data = payload.model_dump(exclude={"origin", "location"})
    data["role"] = payload.role.value
    data["mother_for"] = payload.mother_for.value if payload.mother_for else None
    for key in ("want_children", "prayer_freq"):
        if data.get(key) is not None:
            data[key] = data[key].value

    email = (payload.email or "").strip().lower()
    data["email"] = email or None
    if email and store.email_taken(email):
        raise Conflict("Email already registered")

    user = User(**data)
    user.origin = json.dumps(payload.origin) if payload.origin else None
    user.location = payload.location.model_dump_json() if payload.location else None

    try:
        store.add_user(user)
    except IntegrityError:
        # lost a race on the email unique key
        store.rollback()
        raise Conflict("Email already registered")
    store.commit()
    logger.info(f"[users] created {user.id} role={user.role} mother_for={user.mother_for}")
    return user


# columns that cannot be cleared; an explicit null leaves them alone
_REQUIRED_FIELDS = {"display_name", "dob", "onboarding_completed", "discoverable"}


def update_profile(store: ProfileStore, me: User, payload: UserUpdateRequest) -> User:
    values = payload.model_dump(exclude_unset=True, mode="json")
    for key in list(values):
        value = values[key]
        if isinstance(value, str):
            value = value.strip() or None
        if value is None and key in _REQUIRED_FIELDS:
            del values[key]
            continue
        values[key] = value

    if "dob" in values:
        values["dob"] = payload.dob
    if "origin" in values:
        values["origin"] = json.dumps(values["origin"]) if values["origin"] else None

    if "role" in values or "mother_for" in values:
        role = values.get("role") or me.role
        mother_for = values.get("mother_for", me.mother_for)
        try:
            persona = parse_persona(role, mother_for)
        except InvalidAccountState:
            raise ValidationFailed(
                "mother_for is required for the mother role",
                details={"role": role, "mother_for": mother_for},
            )
        if persona is None:
            raise ValidationFailed("Unknown role", details={"role": role})

        values["role"] = persona.role.value
        if persona.role == Role.mother:
            values["mother_for"] = persona.mother_for.value
        else:
            values["mother_for"] = None
            values["ward_display_name"] = None

    for key, value in values.items():
        setattr(me, key, value)
    store.commit()
    logger.info(f"[users] {me.id} profile updated: {sorted(values)}")
    return me


def profile_completeness(user: User) -> int:
    score = 0
    for field, weight in COMPLETENESS_WEIGHTS:
        value = getattr(user, field, None)
        if isinstance(value, str):
            value = value.strip()
        if value is not None and value != "":
            score += weight
    if user.photos:
        score += COMPLETENESS_PHOTO_WEIGHT
    return min(100, score)


def update_preferences(store: ProfileStore, me: User, payload: PreferenceUpdateRequest) -> Preference:
    values = payload.model_dump(exclude_unset=True)
    prefs = store.upsert_preferences(me.id, values)
    store.commit()
    logger.debug(f"[users] {me.id} preferences updated: {sorted(values)}")
    return prefs


def update_location(store: ProfileStore, me: User, location: GeoPoint) -> User:
    me.location = location.model_dump_json()
    store.commit()
    return me


def add_photo(store: ProfileStore, me: User, url: str) -> Photo:
    photo = store.add_photo(me.id, url, ordering=len(me.photos or []))
    store.commit()
    return photo


def delete_account(store: ProfileStore, me: User) -> List[MatchDeleted]:
    user_id = me.id
    match_ids = store.delete_user(user_id)
    store.commit()
    logger.info(f"[users] deleted account {user_id} ({len(match_ids)} matches removed)")
    return [MatchDeleted(match_id=m) for m in match_ids]
