# models/interest.py
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey, false
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Interest(Base):
    """Заявка родителя: борец готов выступить в таком-то весе и возрасте."""

    __tablename__ = "wrestler_interests"

    id = Column(Integer, primary_key=True, index=True)
    wrestler_id = Column(Integer, ForeignKey("wrestlers.id", ondelete="CASCADE"), nullable=False, index=True)

    event_name = Column(String(200), nullable=True)
    event_date = Column(Date, nullable=True)
    weight_class = Column(String(20), nullable=False)
    age_group = Column(String(64), nullable=False)
    age_group_normalized = Column(String(64), nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # Устаревшие флаги для отображения; авторитетное состояние живёт в matches
    parent_ok = Column(Boolean, nullable=False, default=False, server_default=false())
    coach_ok = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    wrestler = relationship("Wrestler", backref="interests")

    def __repr__(self) -> str:
        return (
            f"<Interest id={self.id} wrestler={self.wrestler_id} "
            f"weight={self.weight_class} age={self.age_group_normalized}>"
        )
