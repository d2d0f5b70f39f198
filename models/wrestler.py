from sqlalchemy import Column, Integer, BigInteger, String, DateTime
from sqlalchemy.sql import func

from .base import Base


class Wrestler(Base):
    __tablename__ = "wrestlers"

    id = Column(Integer, primary_key=True, index=True)
    parent_user_id = Column(BigInteger, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self) -> str:
        return f"<Wrestler id={self.id} parent={self.parent_user_id}>"
