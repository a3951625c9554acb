import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_uuid)
    email = Column(String, unique=True, nullable=True)
    display_name = Column(String, nullable=False)

    # male | female | mother
    role = Column(String, nullable=False, index=True)
    # son | daughter, required when role == mother
    mother_for = Column(String, nullable=True)
    ward_display_name = Column(String, nullable=True)

    dob = Column(Date, nullable=False)
    city = Column(String, nullable=True)
    country = Column(String, nullable=True)
    nationality = Column(String, nullable=True)

    # serialized multi-value, e.g. '["Egypt", "Sudan"]'
    origin = Column(Text, nullable=True)

    height_cm = Column(Integer, nullable=True)
    education = Column(String, nullable=True)
    profession = Column(String, nullable=True)
    marital_status = Column(String, nullable=True)
    sect = Column(String, nullable=True)
    smoker = Column(String, nullable=True)
    want_children = Column(String, nullable=True)
    relocate = Column(Boolean, nullable=True)
    religiousness = Column(Integer, nullable=True)
    prayer_freq = Column(String, nullable=True)
    bio = Column(Text, nullable=True)

    muslim_affirmed = Column(Boolean, nullable=False, default=False)
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    discoverable = Column(Boolean, nullable=False, default=True)

    # JSON text: {"lat": .., "lng": ..}
    location = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    photos = relationship(
        "Photo",
        order_by="Photo.ordering",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    preferences = relationship(
        "Preference",
        uselist=False,
        cascade="all, delete-orphan",
    )


class Photo(Base):
    __tablename__ = "photos"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    url = Column(String, nullable=False)
    ordering = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
