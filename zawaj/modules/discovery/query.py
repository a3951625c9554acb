from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Set

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from zawaj.core.clock import years_before
from zawaj.core.match_config import MINIMUM_AGE
from zawaj.models.block import Block
from zawaj.models.swipe import Swipe
from zawaj.models.user import User
from zawaj.modules.discovery.eligibility import (
    Persona,
    complementary_guardians,
    eligible_targets,
    persona_clause,
)
from zawaj.schemas.preference import PreferenceFilters


# ------------------------------------------------------------------
# Exclusions
# ------------------------------------------------------------------

def collect_exclusions(
    viewer_id: str,
    blocks: Iterable[Block],
    swipes_from_viewer: Iterable[Swipe],
    seen_ids: Iterable[str],
    session_exclude_ids: Iterable[str],
) -> Set[str]:
    excluded = {viewer_id}
    excluded.update(b.other_party(viewer_id) for b in blocks)
    excluded.update(s.to_user_id for s in swipes_from_viewer)
    excluded.update(seen_ids)
    excluded.update(i for i in session_exclude_ids if i)
    return excluded


# ------------------------------------------------------------------
# Predicate pieces
# ------------------------------------------------------------------

def _hard_constraints(viewer_id: str, persona: Optional[Persona], day: date) -> List[ColumnElement]:
    return [
        User.id != viewer_id,
        persona_clause(eligible_targets(persona)),
        or_(User.muslim_affirmed.is_(True), User.onboarding_completed.is_(True)),
        User.dob <= years_before(day, MINIMUM_AGE),
        User.discoverable.is_(True),
    ]


def _allow_list(column, values: Optional[List[str]]) -> Optional[ColumnElement]:
    if not values:
        return None
    return column.in_(values)


def _soft_constraints(prefs: PreferenceFilters, day: date) -> List[ColumnElement]:
    clauses: List[Optional[ColumnElement]] = []

    # unset religiousness passes so incomplete profiles are not hidden
    if prefs.religiousness_min:
        clauses.append(
            or_(User.religiousness >= prefs.religiousness_min, User.religiousness.is_(None))
        )

    if prefs.age_min:
        clauses.append(User.dob <= years_before(day, prefs.age_min))
    if prefs.age_max:
        # inclusive: a 40-year-old still matches age_max=40
        clauses.append(User.dob > years_before(day, prefs.age_max + 1))

    if prefs.height_min_cm:
        clauses.append(User.height_cm >= prefs.height_min_cm)
    if prefs.height_max_cm:
        clauses.append(User.height_cm <= prefs.height_max_cm)

    clauses.append(_allow_list(User.country, prefs.countries))
    clauses.append(_allow_list(User.city, prefs.cities))
    clauses.append(_allow_list(User.sect, prefs.sect_preferences))
    clauses.append(_allow_list(User.education, prefs.education_preferences))
    clauses.append(_allow_list(User.marital_status, prefs.marital_status_preferences))
    clauses.append(_allow_list(User.smoker, prefs.smoking_preferences))
    clauses.append(_allow_list(User.want_children, prefs.children_preferences))

    if prefs.relocate_preference is not None:
        clauses.append(User.relocate.is_(prefs.relocate_preference))

    # origin is stored serialized, so match by containment
    if prefs.origin_preferences:
        clauses.append(
            or_(*[User.origin.contains(o, autoescape=True) for o in prefs.origin_preferences])
        )

    return [c for c in clauses if c is not None]


def _guardian_only(persona: Optional[Persona], prefs: PreferenceFilters) -> Optional[ColumnElement]:
    if persona is None or not persona.is_guardian or not prefs.show_only_mothers:
        return None
    return persona_clause(complementary_guardians(persona))


# ------------------------------------------------------------------
# Builder
# ------------------------------------------------------------------

def build_candidate_predicate(
    viewer_id: str,
    persona: Optional[Persona],
    prefs: PreferenceFilters,
    excluded_ids: Set[str],
    day: date,
) -> ColumnElement:
    clauses = _hard_constraints(viewer_id, persona, day)
    clauses.extend(_soft_constraints(prefs, day))

    guardian_clause = _guardian_only(persona, prefs)
    if guardian_clause is not None:
        clauses.append(guardian_clause)

    if excluded_ids:
        clauses.append(User.id.notin_(sorted(excluded_ids)))

    return and_(*clauses)
