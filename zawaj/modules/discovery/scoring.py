from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from zawaj.core.match_config import (
    ADMIRER_BOOST,
    BIO_BOOST,
    EARTH_RADIUS_KM,
    EDUCATION_BOOST,
    JITTER_RANGE,
    MANY_PHOTOS_BOOST,
    MANY_PHOTOS_THRESHOLD,
    PHOTO_BOOST,
    PROFESSION_BOOST,
    RECENCY_TIERS,
)
from zawaj.models.swipe import Swipe
from zawaj.models.user import User
from zawaj.schemas.user import GeoPoint


@dataclass
class ScoredCandidate:
    user: User
    score: float
    distance_km: Optional[float] = None
    liked_you: bool = False
    super_liked_you: bool = False


# ------------------------------------------------------------------
# Geo
# ------------------------------------------------------------------

def parse_location(raw: Optional[str]) -> Optional[GeoPoint]:
    if not raw or not isinstance(raw, str):
        return None
    try:
        return GeoPoint.model_validate_json(raw)
    except ValidationError:
        return None


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)

    h = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


# ------------------------------------------------------------------
# Score parts
# ------------------------------------------------------------------

def recency_boost(updated_at: Optional[datetime], now: datetime) -> int:
    if updated_at is None:
        return 0
    age_days = (now - updated_at).total_seconds() / 86400
    for max_days, boost in RECENCY_TIERS:
        if age_days < max_days:
            return boost
    return 0


def completeness_boost(user: User) -> int:
    score = 0
    photo_count = len(user.photos or [])
    if photo_count >= 1:
        score += PHOTO_BOOST
    if photo_count >= MANY_PHOTOS_THRESHOLD:
        score += MANY_PHOTOS_BOOST
    if user.bio:
        score += BIO_BOOST
    if user.profession:
        score += PROFESSION_BOOST
    if user.education:
        score += EDUCATION_BOOST
    return score


def stable_jitter(user_id: str) -> float:
    """Value in [0, JITTER_RANGE) that never changes for a given id."""
    digest = hashlib.sha256(user_id.encode("utf-8")).digest()
    fraction = int.from_bytes(digest[:8], "big") / 2 ** 64
    return fraction * JITTER_RANGE


# ------------------------------------------------------------------
# Ranking
# ------------------------------------------------------------------

def rank_candidates(
    candidates: Iterable[User],
    now: datetime,
    admirers: Dict[str, Swipe],
    viewer_location: Optional[GeoPoint] = None,
    max_distance_km: Optional[int] = None,
) -> List[ScoredCandidate]:
    """
    Distance-filter and score ``candidates``, best first.

    ``admirers`` maps user id to that user's right swipe on the viewer;
    callers pass only admirers the viewer has not answered yet.
    The distance filter applies only when the viewer has a location and
    a distance preference; candidates without a location always pass.
    """
    apply_distance = viewer_location is not None and bool(max_distance_km)
    ranked: List[ScoredCandidate] = []

    for user in candidates:
        distance = None
        other_location = parse_location(user.location)
        if viewer_location is not None and other_location is not None:
            distance = haversine_km(viewer_location, other_location)
        if apply_distance and distance is not None and distance > max_distance_km:
            continue

        admirer_swipe = admirers.get(user.id)
        score = 0.0
        if admirer_swipe is not None:
            score += ADMIRER_BOOST
        score += recency_boost(user.updated_at, now)
        score += completeness_boost(user)
        score += stable_jitter(user.id)

        ranked.append(
            ScoredCandidate(
                user=user,
                score=score,
                distance_km=round(distance, 1) if distance is not None else None,
                liked_you=admirer_swipe is not None,
                super_liked_you=bool(admirer_swipe is not None and admirer_swipe.is_super_like),
            )
        )

    ranked.sort(key=lambda c: (-c.score, c.user.id))
    return ranked
