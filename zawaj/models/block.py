import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


class Block(Base):
    __tablename__ = "blocks"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    blocker_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    blocked_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="blocks_pair_key"),
    )

    def other_party(self, user_id: str) -> str:
        return self.blocked_id if self.blocker_id == user_id else self.blocker_id
