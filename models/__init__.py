# Импорт всех моделей, чтобы Base.metadata знала о каждой таблице
from .base import Base
from .need import Need
from .wrestler import Wrestler
from .team import Team
from .interest import Interest
from .match import Match
from .message import Message

__all__ = ["Base", "Need", "Wrestler", "Team", "Interest", "Match", "Message"]
