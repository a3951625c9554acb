import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    reporter_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    # user, message or photo; not a foreign key since the target may be gone
    target_type = Column(String, nullable=False)
    target_id = Column(String, nullable=False)
    reason = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
