from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


class Preference(Base):
    __tablename__ = "preferences"

    user_id = Column(String, ForeignKey("users.id"), primary_key=True)

    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)
    distance_km = Column(Integer, nullable=True)
    height_min_cm = Column(Integer, nullable=True)
    height_max_cm = Column(Integer, nullable=True)
    religiousness_min = Column(Integer, nullable=True)

    # allow-lists stored as JSON lists: ["Jordan", "Egypt"]
    # rows written by older clients may hold a JSON-encoded string instead
    countries = Column(JSON, nullable=True)
    cities = Column(JSON, nullable=True)
    sect_preferences = Column(JSON, nullable=True)
    education_preferences = Column(JSON, nullable=True)
    marital_status_preferences = Column(JSON, nullable=True)
    smoking_preferences = Column(JSON, nullable=True)
    children_preferences = Column(JSON, nullable=True)
    origin_preferences = Column(JSON, nullable=True)

    # null = any
    relocate_preference = Column(Boolean, nullable=True)
    show_only_mothers = Column(Boolean, nullable=False, default=False)

    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
