import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


class Match(Base):
    __tablename__ = "matches"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # canonical pair: user_a_id < user_b_id
    user_a_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    user_b_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    # JSON text: {"a_role": .., "b_role": ..} taken when the match was made
    roles_snapshot = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_message_at = Column(DateTime, nullable=True)

    user_a = relationship("User", foreign_keys=[user_a_id], lazy="joined")
    user_b = relationship("User", foreign_keys=[user_b_id], lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_a_id", "user_b_id", name="matches_pair_key"),
        CheckConstraint("user_a_id < user_b_id", name="matches_canonical_order_check"),
    )

    def other_user_id(self, user_id: str) -> str:
        return self.user_b_id if self.user_a_id == user_id else self.user_a_id

    def involves(self, user_id: str) -> bool:
        return user_id in (self.user_a_id, self.user_b_id)


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    match_id = Column(String, ForeignKey("matches.id"), nullable=False, index=True)
    sender_id = Column(String, nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class AuditLog(Base):
    """Append-only trail of guardian-involved messaging."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    match_id = Column(String, nullable=False, index=True)
    sender_id = Column(String, nullable=False)
    action = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
