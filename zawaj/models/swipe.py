from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from zawaj.core.clock import utcnow
from zawaj.core.db import Base


class Swipe(Base):
    __tablename__ = "swipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    direction = Column(
        String,
        CheckConstraint(
            "direction IN ('left','right')",
            name="swipes_direction_check",
        ),
        nullable=False,
    )
    is_super_like = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    # refreshed on every re-decision; undo picks the latest one
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("from_user_id", "to_user_id", name="swipes_pair_key"),
    )
