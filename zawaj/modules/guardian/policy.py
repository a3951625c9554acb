"""
Rules for proxy matching by guardians (role=mother acting for a son or
daughter).

Eligibility of guardians is part of the persona table in
``zawaj.modules.discovery.eligibility``; this module covers the acting
user's account state and the messaging side of the policy.
"""
from typing import List, Optional

from loguru import logger

from zawaj.core import config
from zawaj.core.errors import Forbidden, InvalidAccountState
from zawaj.core.match_config import GUARDIAN_AUDIT_ACTION
from zawaj.models.match import Match
from zawaj.models.user import User
from zawaj.modules.discovery.eligibility import Persona, parse_persona
from zawaj.schemas.enums import Role
from zawaj.services.profile_store import ProfileStore


def acting_persona(user: User) -> Optional[Persona]:
    """Persona of the user performing an action. Defects are surfaced, never defaulted."""
    try:
        return parse_persona(user.role, user.mother_for)
    except InvalidAccountState:
        logger.error(f"[guardian] {user.id} ({user.display_name}) is a mother without mother_for")
        raise


def is_guardian_user(user: Optional[User]) -> bool:
    return user is not None and "".join((user.role or "").split()).lower() == Role.mother.value


def is_guardian_match(match: Match) -> bool:
    return is_guardian_user(match.user_a) or is_guardian_user(match.user_b)


def ensure_chat_allowed(match: Match, allowed: Optional[bool] = None) -> None:
    if allowed is None:
        allowed = config.GUARDIAN_CHAT_ALLOWED
    if is_guardian_match(match) and not allowed:
        raise Forbidden("Chat not allowed by guardian policy", details={"match_id": match.id})


def audit_message(store: ProfileStore, match: Match, sender_id: str) -> bool:
    """Append an audit row for guardian-involved matches. Returns whether one was written."""
    if not is_guardian_match(match):
        return False
    store.append_audit(match.id, sender_id, GUARDIAN_AUDIT_ACTION)
    return True


def guardians_missing_ward(store: ProfileStore) -> List[User]:
    return store.guardians_missing_ward()
