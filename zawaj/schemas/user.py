from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from zawaj.core.clock import age_on, today
from zawaj.core.match_config import MINIMUM_AGE
from zawaj.schemas.base import BaseSchema, TimestampedSchema
from zawaj.schemas.enums import ChildrenStance, MotherFor, PrayerFrequency, Role


def _check_adult(v: date) -> date:
    age = age_on(v, today())
    if age < MINIMUM_AGE:
        raise ValueError(f"must be at least {MINIMUM_AGE} years old")
    if age > 100:
        raise ValueError("please check the date of birth")
    return v


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# ---------- create ----------
class UserCreateRequest(BaseModel):
    display_name: str = Field(..., min_length=2, max_length=100)
    email: Optional[str] = None
    role: Role
    mother_for: Optional[MotherFor] = None
    ward_display_name: Optional[str] = None
    dob: date

    city: Optional[str] = None
    country: Optional[str] = None
    nationality: Optional[str] = None
    origin: Optional[List[str]] = None
    height_cm: Optional[int] = Field(None, gt=0, le=250)
    education: Optional[str] = None
    profession: Optional[str] = None
    marital_status: Optional[str] = None
    sect: Optional[str] = None
    smoker: Optional[str] = None
    want_children: Optional[ChildrenStance] = None
    relocate: Optional[bool] = None
    religiousness: Optional[int] = Field(None, ge=1, le=5)
    prayer_freq: Optional[PrayerFrequency] = None
    bio: Optional[str] = Field(None, max_length=500)

    muslim_affirmed: bool
    onboarding_completed: bool = False
    discoverable: bool = True
    location: Optional[GeoPoint] = None

    @field_validator("dob")
    @classmethod
    def _adult(cls, v: date) -> date:
        return _check_adult(v)

    @model_validator(mode="after")
    def _guardian_needs_ward(self):
        if not self.muslim_affirmed:
            raise ValueError("muslim affirmation required")
        if self.role == Role.mother and self.mother_for is None:
            raise ValueError("mother_for is required for the mother role")
        if self.role != Role.mother:
            self.mother_for = None
            self.ward_display_name = None
        return self


# ---------- update ----------
class UserUpdateRequest(BaseModel):
    """
    Partial profile edit. Only fields present in the body change; an
    empty string clears a text field. Role rules are checked against the
    merged profile in the service.
    """

    display_name: Optional[str] = Field(None, min_length=2, max_length=100)
    role: Optional[Role] = None
    mother_for: Optional[MotherFor] = None
    ward_display_name: Optional[str] = None
    dob: Optional[date] = None

    city: Optional[str] = None
    country: Optional[str] = None
    nationality: Optional[str] = None
    origin: Optional[List[str]] = None
    height_cm: Optional[int] = Field(None, gt=0, le=250)
    education: Optional[str] = None
    profession: Optional[str] = None
    marital_status: Optional[str] = None
    sect: Optional[str] = None
    smoker: Optional[str] = None
    want_children: Optional[ChildrenStance] = None
    relocate: Optional[bool] = None
    religiousness: Optional[int] = Field(None, ge=1, le=5)
    prayer_freq: Optional[PrayerFrequency] = None
    bio: Optional[str] = Field(None, max_length=500)

    onboarding_completed: Optional[bool] = None
    discoverable: Optional[bool] = None

    @field_validator("role", "mother_for", "want_children", "prayer_freq", mode="before")
    @classmethod
    def _blank_enum(cls, v):
        return None if isinstance(v, str) and not v.strip() else v

    @field_validator("dob")
    @classmethod
    def _adult(cls, v: Optional[date]) -> Optional[date]:
        return _check_adult(v) if v is not None else v


# ---------- location ----------
class LocationUpdateRequest(BaseModel):
    location: GeoPoint


# ---------- responses ----------
class PhotoOut(BaseSchema):
    id: str
    url: str
    ordering: int


class UserPublic(TimestampedSchema):
    id: str
    display_name: str
    role: str
    mother_for: Optional[str] = None
    ward_display_name: Optional[str] = None
    dob: date
    city: Optional[str] = None
    country: Optional[str] = None
    nationality: Optional[str] = None
    origin: Optional[str] = None
    height_cm: Optional[int] = None
    education: Optional[str] = None
    profession: Optional[str] = None
    marital_status: Optional[str] = None
    sect: Optional[str] = None
    smoker: Optional[str] = None
    want_children: Optional[str] = None
    relocate: Optional[bool] = None
    religiousness: Optional[int] = None
    prayer_freq: Optional[str] = None
    bio: Optional[str] = None
    photos: List[PhotoOut] = []


class UserMe(UserPublic):
    email: Optional[str] = None
    muslim_affirmed: bool
    onboarding_completed: bool
    discoverable: bool
    location: Optional[str] = None


class CompletenessOut(BaseModel):
    completeness: int
