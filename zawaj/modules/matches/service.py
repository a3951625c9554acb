from typing import List

from loguru import logger

from zawaj.core.errors import Forbidden, NotFound
from zawaj.models.match import Match
from zawaj.models.user import User
from zawaj.services.chat_sync import MatchDeleted
from zawaj.services.profile_store import ProfileStore


# ---------- MATCH LOGIC ----------

def list_matches(store: ProfileStore, me: User) -> List[Match]:
    return store.matches_for(me.id)


def get_match_for(store: ProfileStore, me: User, match_id: str) -> Match:
    """Matches are only visible to their two participants."""
    match = store.get_match_by_id(match_id)
    if match is None or not match.involves(me.id):
        raise NotFound("Match not found", details={"match_id": match_id})
    return match


def unmatch(store: ProfileStore, me: User, match_id: str) -> MatchDeleted:
    match = store.get_match_by_id(match_id)
    if match is None:
        raise NotFound("Match not found", details={"match_id": match_id})
    if not match.involves(me.id):
        raise Forbidden("Not authorized to unmatch")

    store.delete_match((match.user_a_id, match.user_b_id))
    store.commit()

    logger.info(f"[matches] {me.id} unmatched from {match_id}")
    return MatchDeleted(match_id=match_id)
