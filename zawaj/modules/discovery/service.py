from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from loguru import logger

from zawaj.core.clock import utcnow
from zawaj.core.errors import InvalidAccountState, NotFound, ValidationFailed
from zawaj.core.match_config import CANDIDATE_POOL_LIMIT, MAX_PAGE_LIMIT
from zawaj.models.user import User
from zawaj.modules.discovery.eligibility import require_persona
from zawaj.modules.discovery.query import build_candidate_predicate, collect_exclusions
from zawaj.modules.discovery.scoring import ScoredCandidate, parse_location, rank_candidates
from zawaj.schemas.preference import PreferenceFilters
from zawaj.services.profile_store import ProfileStore


@dataclass
class DiscoveryPage:
    page: int
    total: int = 0
    has_more: bool = False
    candidates: List[ScoredCandidate] = field(default_factory=list)


def parse_exclude_ids(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def discover(
    store: ProfileStore,
    viewer: User,
    page: int,
    limit: int,
    session_exclude_ids: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> DiscoveryPage:
    """
    One page of candidates for ``viewer``, best first.

    Best-effort: only the CANDIDATE_POOL_LIMIT most recently updated
    matching profiles are scored, so results are not exhaustive.

    Read-only: showing a profile does not mark it seen. Seen markers are
    written only by ``mark_seen`` (POST /discovery/seen), so paging through
    the deck stays stable and a shown profile stays eligible until the
    client reports it.
    """
    if page < 0 or not 1 <= limit <= MAX_PAGE_LIMIT:
        raise ValidationFailed(f"page must be >= 0 and limit within 1..{MAX_PAGE_LIMIT}")

    now = now or utcnow()
    session_exclude_ids = list(session_exclude_ids)

    try:
        persona = require_persona(viewer)
    except InvalidAccountState:
        logger.warning(f"[discovery] guardian {viewer.id} has no mother_for, empty deck")
        return DiscoveryPage(page=page)
    if persona is None:
        logger.warning(f"[discovery] viewer {viewer.id} has unknown role {viewer.role!r}")
        return DiscoveryPage(page=page)

    prefs = PreferenceFilters.from_row(store.get_preferences(viewer.id))
    swipes = store.get_swipes_from(viewer.id)
    excluded = collect_exclusions(
        viewer.id,
        store.get_blocks_involving(viewer.id),
        swipes,
        store.get_seen_ids(viewer.id),
        session_exclude_ids,
    )
    logger.debug(
        f"[discovery] viewer={viewer.id} persona={persona} "
        f"session_excludes={len(session_exclude_ids)} total_excluded={len(excluded)}"
    )

    predicate = build_candidate_predicate(viewer.id, persona, prefs, excluded, now.date())
    pool = store.find_candidates(predicate, CANDIDATE_POOL_LIMIT)

    # anyone the viewer already answered sits in ``excluded``
    admirers = {
        s.from_user_id: s
        for s in store.get_right_swipes_to(viewer.id)
        if s.from_user_id not in excluded
    }

    ranked = rank_candidates(
        pool,
        now,
        admirers,
        viewer_location=parse_location(viewer.location),
        max_distance_km=prefs.distance_km,
    )

    total = len(ranked)
    start = page * limit
    result = DiscoveryPage(
        page=page,
        total=total,
        has_more=(page + 1) * limit < total,
        candidates=ranked[start:start + limit],
    )
    logger.info(
        f"[discovery] viewer={viewer.id} pool={len(pool)} ranked={total} "
        f"page={page} returned={len(result.candidates)}"
    )
    return result


def mark_seen(store: ProfileStore, viewer: User, seen_user_id: str) -> None:
    if seen_user_id == viewer.id:
        raise ValidationFailed("Cannot mark yourself as seen")
    if store.get_user(seen_user_id) is None:
        raise NotFound("User not found", details={"user_id": seen_user_id})

    store.upsert_seen(viewer.id, seen_user_id)
    store.commit()
    logger.debug(f"[discovery] {viewer.id} marked {seen_user_id} as seen")
