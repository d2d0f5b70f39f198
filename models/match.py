# models/match.py
from sqlalchemy import (
    Column, Integer, BigInteger, String, Boolean, DateTime, ForeignKey,
    CheckConstraint, Index, false, text,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_DECLINED = "declined"
STATUS_CANCELLED = "cancelled"

MATCH_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_DECLINED, STATUS_CANCELLED)
ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)
TERMINAL_FAILURE_STATUSES = (STATUS_DECLINED, STATUS_CANCELLED)

SIDE_COACH = "coach"
SIDE_PARENT = "parent"
SIDES = (SIDE_COACH, SIDE_PARENT)

_ACTIVE_ONLY = text("status NOT IN ('declined', 'cancelled')")


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    coach_need_id = Column(Integer, ForeignKey("coach_needs.id"), nullable=False, index=True)
    wrestler_interest_id = Column(Integer, ForeignKey("wrestler_interests.id"), nullable=False, index=True)
    coach_user_id = Column(BigInteger, nullable=False, index=True)

    status = Column(String(16), nullable=False, default=STATUS_PENDING)
    coach_ok = Column(Boolean, nullable=False, default=False, server_default=false())
    parent_ok = Column(Boolean, nullable=False, default=False, server_default=false())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    need = relationship("Need", backref="matches")
    interest = relationship("Interest", backref="matches")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'declined', 'cancelled')",
            name="status_valid",
        ),
        # confirmed <=> оба флага; для declined/cancelled флаги могут остаться любыми
        CheckConstraint(
            "status IN ('declined', 'cancelled') "
            "OR ((status = 'confirmed') = (coach_ok AND parent_ok))",
            name="status_matches_flags",
        ),
        # Не больше одного активного матча на пару (need, interest)
        Index(
            "uq_matches_active_pair",
            "coach_need_id",
            "wrestler_interest_id",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
    )

    @property
    def is_confirmed(self) -> bool:
        return self.status == STATUS_CONFIRMED

    def __repr__(self) -> str:
        return (
            f"<Match id={self.id} need={self.coach_need_id} interest={self.wrestler_interest_id} "
            f"status={self.status} coach_ok={self.coach_ok} parent_ok={self.parent_ok}>"
        )
