from typing import Optional

from pydantic import BaseModel


class MatchCounts(BaseModel):
    total: int = 0
    pending: int = 0
    confirmed: int = 0


class MessageCounts(BaseModel):
    total: int = 0
    # None, если непрочитанные не отслеживаются
    unread: Optional[int] = None


class DashboardSummary(BaseModel):
    ok: bool = True
    matches: MatchCounts
    messages: MessageCounts
    error: Optional[str] = None
