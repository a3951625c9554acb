import re
from typing import List

from loguru import logger

from zawaj.core.errors import Blocked, ValidationFailed
from zawaj.core.match_config import BANNED_MESSAGE_PATTERNS, MAX_MESSAGE_LENGTH
from zawaj.models.match import Match, Message
from zawaj.models.user import User
from zawaj.modules.guardian.policy import audit_message, ensure_chat_allowed
from zawaj.modules.matches.service import get_match_for
from zawaj.services.profile_store import ProfileStore

_BANNED = [re.compile(p, re.IGNORECASE) for p in BANNED_MESSAGE_PATTERNS]


def _open_conversation(store: ProfileStore, me: User, match_id: str) -> Match:
    match = get_match_for(store, me, match_id)
    if store.block_exists(me.id, match.other_user_id(me.id)):
        raise Blocked("Blocked")
    return match


def get_messages(store: ProfileStore, me: User, match_id: str, limit: int) -> List[Message]:
    match = _open_conversation(store, me, match_id)
    return store.list_messages(match.id, limit)


def send_message(store: ProfileStore, me: User, match_id: str, text: str) -> Message:
    match = _open_conversation(store, me, match_id)

    text = (text or "").strip()
    if not text or len(text) > MAX_MESSAGE_LENGTH:
        raise ValidationFailed(f"Message must be 1..{MAX_MESSAGE_LENGTH} characters")
    if any(p.search(text) for p in _BANNED):
        raise ValidationFailed("Message content not allowed")

    ensure_chat_allowed(match)

    msg = store.add_message(match, me.id, text)
    if audit_message(store, match, me.id):
        logger.debug(f"[messages] guardian audit row for match {match.id}")
    store.commit()
    return msg
