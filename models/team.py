from sqlalchemy import Column, Integer, BigInteger, String

from .base import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    coach_user_id = Column(BigInteger, unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    coach_name = Column(String(200), nullable=True)
    contact_email = Column(String(255), nullable=True)
    logo_path = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name!r}>"
