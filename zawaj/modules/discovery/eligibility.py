"""
Who may be shown to, and swipe on, whom.

Stored role strings are parsed once into a ``Persona`` and every rule
below works on personas only. The table is shared by discovery, the
swipe recorder and the liked-me listing so the three can never disagree.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from sqlalchemy import and_, false, func, or_
from sqlalchemy.sql.elements import ColumnElement

from zawaj.core.errors import InvalidAccountState
from zawaj.models.user import User
from zawaj.schemas.enums import MotherFor, Role


@dataclass(frozen=True)
class Persona:
    role: Role
    mother_for: Optional[MotherFor] = None

    @property
    def is_guardian(self) -> bool:
        return self.role == Role.mother

    def __str__(self) -> str:
        if self.is_guardian:
            return f"mother_for_{self.mother_for.value}"
        return self.role.value


MALE = Persona(Role.male)
FEMALE = Persona(Role.female)
MOTHER_OF_SON = Persona(Role.mother, MotherFor.son)
MOTHER_OF_DAUGHTER = Persona(Role.mother, MotherFor.daughter)

ALL_PERSONAS = (MALE, FEMALE, MOTHER_OF_SON, MOTHER_OF_DAUGHTER)

ELIGIBLE_TARGETS = {
    MALE: frozenset({FEMALE}),
    FEMALE: frozenset({MALE}),
    MOTHER_OF_SON: frozenset({FEMALE, MOTHER_OF_DAUGHTER}),
    MOTHER_OF_DAUGHTER: frozenset({MALE, MOTHER_OF_SON}),
}


_WHITESPACE = (" ", "\t", "\n", "\r")


def _normalize(value: Optional[str]) -> str:
    # tolerate data-entry noise such as "Fe male"
    return "".join((value or "").split()).lower()


def normalized_column(column) -> ColumnElement:
    """SQL twin of ``_normalize`` so stored noise reads the same in queries."""
    expr = column
    for ch in _WHITESPACE:
        expr = func.replace(expr, ch, "")
    return func.lower(expr)


def parse_persona(role: Optional[str], mother_for: Optional[str]) -> Optional[Persona]:
    """
    Build a persona from stored strings.

    Unknown roles give ``None``. A mother without a valid ``mother_for``
    is a data defect and raises ``InvalidAccountState``.
    """
    try:
        parsed_role = Role(_normalize(role))
    except ValueError:
        return None

    if parsed_role != Role.mother:
        return Persona(parsed_role)

    try:
        ward = MotherFor(_normalize(mother_for))
    except ValueError:
        raise InvalidAccountState(
            "mother_for is required for the mother role",
            details={"role": role, "mother_for": mother_for},
        )
    return Persona(Role.mother, ward)


def require_persona(user: User) -> Optional[Persona]:
    return parse_persona(user.role, user.mother_for)


def persona_or_none(user: User) -> Optional[Persona]:
    """Lenient variant for the *other* party: defects just make them ineligible."""
    try:
        return parse_persona(user.role, user.mother_for)
    except InvalidAccountState:
        return None


def eligible_targets(persona: Optional[Persona]) -> FrozenSet[Persona]:
    if persona is None:
        return frozenset()
    return ELIGIBLE_TARGETS.get(persona, frozenset())


def admits(viewer: Optional[Persona], target: Optional[Persona]) -> bool:
    return target is not None and target in eligible_targets(viewer)


def admits_either(a: Optional[Persona], b: Optional[Persona]) -> bool:
    return admits(a, b) or admits(b, a)


def complementary_guardians(persona: Optional[Persona]) -> FrozenSet[Persona]:
    return frozenset(p for p in eligible_targets(persona) if p.is_guardian)


def persona_clause(targets: FrozenSet[Persona]) -> ColumnElement:
    """SQL predicate matching users whose stored role is one of ``targets``."""
    if not targets:
        return false()

    clauses = []
    plain_roles = sorted(p.role.value for p in targets if not p.is_guardian)
    wards = sorted(p.mother_for.value for p in targets if p.is_guardian)
    role = normalized_column(User.role)
    if plain_roles:
        clauses.append(role.in_(plain_roles))
    if wards:
        clauses.append(
            and_(role == Role.mother.value, normalized_column(User.mother_for).in_(wards))
        )
    return or_(*clauses)
