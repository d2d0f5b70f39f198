from sqlalchemy import Column, Integer, BigInteger, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(BigInteger, nullable=False)
    receiver_id = Column(BigInteger, nullable=True)
    text = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)

    match = relationship("Match", backref="messages")

    __table_args__ = (
        Index("ix_messages_match_sent", "match_id", "sent_at"),
    )

    def __repr__(self) -> str:
        return f"<Message id={self.id} match={self.match_id} sender={self.sender_id}>"
