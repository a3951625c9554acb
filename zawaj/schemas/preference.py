import json
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, Field, model_validator

from zawaj.schemas.base import BaseSchema


# ------------------------------------------------------------------
# Lenient decoding of stored preferences
# ------------------------------------------------------------------
# Historical rows hold JSON lists, JSON-encoded strings or garbage.
# Anything that does not decode to a usable value becomes None, which
# the query builder reads as "no constraint".

def _lenient_str_list(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, (list, tuple)):
        return None
    items = [
        str(v).strip()
        for v in value
        if isinstance(v, (str, int, float)) and not isinstance(v, bool) and str(v).strip()
    ]
    return items or None


def _lenient_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _lenient_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


LenientList = Annotated[Optional[List[str]], BeforeValidator(_lenient_str_list)]
LenientInt = Annotated[Optional[int], BeforeValidator(_lenient_int)]
LenientBool = Annotated[Optional[bool], BeforeValidator(_lenient_bool)]


class PreferenceFilters(BaseSchema):
    """Viewer preferences as the candidate query builder consumes them."""

    age_min: LenientInt = None
    age_max: LenientInt = None
    distance_km: LenientInt = None
    height_min_cm: LenientInt = None
    height_max_cm: LenientInt = None
    religiousness_min: LenientInt = None

    countries: LenientList = None
    cities: LenientList = None
    sect_preferences: LenientList = None
    education_preferences: LenientList = None
    marital_status_preferences: LenientList = None
    smoking_preferences: LenientList = None
    children_preferences: LenientList = None
    origin_preferences: LenientList = None

    relocate_preference: LenientBool = None
    show_only_mothers: LenientBool = None

    @classmethod
    def from_row(cls, row) -> "PreferenceFilters":
        if row is None:
            return cls()
        return cls.model_validate(row)


# ------------------------------------------------------------------
# API payloads
# ------------------------------------------------------------------

class PreferenceUpdateRequest(BaseModel):
    age_min: Optional[int] = Field(None, ge=18, le=100)
    age_max: Optional[int] = Field(None, ge=18, le=100)
    distance_km: Optional[int] = Field(None, gt=0, le=20000)
    height_min_cm: Optional[int] = Field(None, ge=100, le=250)
    height_max_cm: Optional[int] = Field(None, ge=100, le=250)
    religiousness_min: Optional[int] = Field(None, ge=1, le=5)

    countries: Optional[List[str]] = None
    cities: Optional[List[str]] = None
    sect_preferences: Optional[List[str]] = None
    education_preferences: Optional[List[str]] = None
    marital_status_preferences: Optional[List[str]] = None
    smoking_preferences: Optional[List[str]] = None
    children_preferences: Optional[List[str]] = None
    origin_preferences: Optional[List[str]] = None

    relocate_preference: Optional[bool] = None
    show_only_mothers: Optional[bool] = None

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.age_min and self.age_max and self.age_min > self.age_max:
            raise ValueError("age_min must not exceed age_max")
        if self.height_min_cm and self.height_max_cm and self.height_min_cm > self.height_max_cm:
            raise ValueError("height_min_cm must not exceed height_max_cm")
        return self


class PreferenceResponse(PreferenceFilters):
    user_id: str
