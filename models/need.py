# models/need.py
from sqlalchemy import Column, Integer, BigInteger, String, Text, Date, DateTime, Boolean, true
from sqlalchemy.sql import func

from .base import Base


class Need(Base):
    """Запрос команды: нужен борец такого-то веса и возраста на турнир."""

    __tablename__ = "coach_needs"

    id = Column(Integer, primary_key=True, index=True)
    coach_user_id = Column(BigInteger, nullable=False, index=True)

    event_name = Column(String(200), nullable=False)
    event_date = Column(Date, nullable=True)
    weight_class = Column(String(20), nullable=False)
    age_group = Column(String(64), nullable=False)
    age_group_normalized = Column(String(64), nullable=False, index=True)

    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    is_open = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Need id={self.id} event={self.event_name!r} "
            f"weight={self.weight_class} age={self.age_group_normalized}>"
        )
