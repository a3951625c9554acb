from sqlalchemy import Column, DateTime, ForeignKey, String

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


class DiscoverySeen(Base):
    __tablename__ = "discovery_seen"

    viewer_id = Column(String, ForeignKey("users.id"), primary_key=True)
    seen_user_id = Column(String, ForeignKey("users.id"), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
