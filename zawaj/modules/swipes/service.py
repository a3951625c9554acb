from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from loguru import logger

from zawaj.core.errors import Blocked, NotEligible, NotFound, NothingToUndo, ValidationFailed
from zawaj.models.match import Match
from zawaj.models.swipe import Swipe
from zawaj.models.user import User
from zawaj.modules.discovery.eligibility import admits, admits_either, persona_or_none
from zawaj.modules.guardian.policy import acting_persona, is_guardian_user
from zawaj.schemas.enums import SwipeDirection
from zawaj.services.chat_sync import MatchCreated, MatchDeleted, MatchEvent
from zawaj.services.profile_store import ProfileStore, canonical_pair


@dataclass
class SwipeOutcome:
    swipe: Swipe
    match: Optional[Match] = None
    events: List[MatchEvent] = field(default_factory=list)


@dataclass
class UndoOutcome:
    swipe: Swipe
    match_deleted: bool = False
    events: List[MatchEvent] = field(default_factory=list)


@dataclass
class AdmirerEntry:
    user: User
    is_super_like: bool
    liked_at: datetime


# ---------- SWIPE ----------

def record_swipe(
    store: ProfileStore,
    me: User,
    to_user_id: str,
    direction,
    is_super_like: bool = False,
) -> SwipeOutcome:
    try:
        direction = SwipeDirection(direction)
    except ValueError:
        raise ValidationFailed("direction must be 'left' or 'right'")

    if to_user_id == me.id:
        raise ValidationFailed("Cannot swipe yourself")

    target = store.get_user(to_user_id)
    if target is None:
        raise NotFound("User not found", details={"user_id": to_user_id})

    if store.block_exists(me.id, target.id):
        raise Blocked("User is blocked")

    my_persona = acting_persona(me)
    target_persona = persona_or_none(target)

    # one writer per pair at a time, so of two crossing right swipes the
    # second always sees the first
    store.lock_pair(canonical_pair(me.id, target.id))

    eligible = admits(my_persona, target_persona)
    prior = store.get_swipe(target.id, me.id)
    swipe_back = prior is not None and prior.direction == SwipeDirection.right.value

    if not eligible and not swipe_back:
        logger.info(
            f"[swipes] eligibility failed {me.id}({my_persona}) -> {target.id}({target_persona})"
        )
        raise NotEligible(
            "Not eligible to swipe this user",
            details={
                "my_role": me.role,
                "my_mother_for": me.mother_for,
                "target_role": target.role,
            },
        )
    if not eligible:
        logger.warning(
            f"[swipes] swipe-back exception: {me.id}({my_persona}) -> {target.id}({target_persona})"
        )

    super_like = bool(is_super_like) and direction == SwipeDirection.right
    swipe = store.upsert_swipe(me.id, target.id, direction.value, super_like)
    logger.info(f"[swipes] saved {me.id} -> {target.id} ({direction.value}, super_like={super_like})")

    outcome = SwipeOutcome(swipe=swipe)

    if direction == SwipeDirection.right:
        # under the pair lock a committed reciprocal swipe is visible here
        reciprocal = store.get_swipe(target.id, me.id)
        if reciprocal is not None and reciprocal.direction == SwipeDirection.right.value:
            pair = canonical_pair(me.id, target.id)
            roles = {u.id: u.role for u in (me, target)}
            match, created = store.upsert_match(
                pair,
                {"a_role": roles[pair[0]], "b_role": roles[pair[1]]},
            )
            outcome.match = match
            if created:
                logger.info(f"[swipes] match {match.id} created for {pair}")
                outcome.events.append(
                    MatchCreated(
                        match_id=match.id,
                        user_a=match.user_a_id,
                        user_b=match.user_b_id,
                        guardian_chat=is_guardian_user(me) or is_guardian_user(target),
                    )
                )

    store.commit()
    return outcome


# ---------- UNDO ----------

def undo_last_swipe(store: ProfileStore, me: User) -> UndoOutcome:
    last = store.latest_swipe_from(me.id)
    if last is None:
        raise NothingToUndo("No swipe to undo")

    outcome = UndoOutcome(swipe=last)

    if last.direction == SwipeDirection.right.value:
        store.lock_pair(canonical_pair(me.id, last.to_user_id))
        match = store.delete_match((me.id, last.to_user_id))
        if match is not None:
            outcome.match_deleted = True
            outcome.events.append(MatchDeleted(match_id=match.id))

    # keep the loaded row readable for the response once it is gone
    store.detach(last)
    store.delete_swipe(last.id)
    store.commit()

    logger.info(
        f"[swipes] undo {me.id} -> {last.to_user_id} ({last.direction}), "
        f"match_deleted={outcome.match_deleted}"
    )
    return outcome


# ---------- LIKED ME ----------

def list_admirers(store: ProfileStore, me: User) -> List[AdmirerEntry]:
    """
    Right swipes aimed at ``me`` that still need an answer.

    Either side's eligibility is enough to list someone here: the admirer
    already made the first move.
    """
    my_persona = persona_or_none(me)

    matched = store.matched_user_ids(me.id)
    answered = {s.to_user_id for s in store.get_swipes_from(me.id)}
    blocked = {b.other_party(me.id) for b in store.get_blocks_involving(me.id)}
    skip = matched | answered | blocked

    swipes = [s for s in store.get_right_swipes_to(me.id) if s.from_user_id not in skip]
    users = store.get_users(s.from_user_id for s in swipes)

    entries: List[AdmirerEntry] = []
    for s in swipes:
        admirer = users.get(s.from_user_id)
        if admirer is None:
            continue
        if not admits_either(my_persona, persona_or_none(admirer)):
            continue
        entries.append(
            AdmirerEntry(user=admirer, is_super_like=bool(s.is_super_like), liked_at=s.updated_at)
        )
    return entries
