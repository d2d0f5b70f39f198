from typing import Optional, List
from datetime import date, datetime

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    text: str = Field(..., max_length=4000, description="Текст сообщения")


class MessageRead(BaseModel):
    id: int
    match_id: int
    sender_id: int
    receiver_id: Optional[int] = None
    text: str
    sent_at: datetime
    read_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageListResponse(BaseModel):
    ok: bool = True
    match_id: int = Field(..., alias="matchId")
    match_status: str = Field(..., alias="matchStatus")
    messages: List[MessageRead]

    class Config:
        validate_by_name = True


class MessageCreatedResponse(BaseModel):
    ok: bool = True
    message: MessageRead


class MessageThread(BaseModel):
    """Строка списка переписок: матч, турнир и превью последнего сообщения."""

    match_id: int = Field(..., alias="matchId")
    match_status: str = Field(..., alias="matchStatus")
    wrestler_id: int = Field(..., alias="wrestlerId")
    wrestler_name: str = Field(..., alias="wrestlerName")
    event_name: Optional[str] = Field(None, alias="eventName")
    event_date: Optional[date] = Field(None, alias="eventDate")
    weight_class: str = Field(..., alias="weightClass")
    age_group: str = Field(..., alias="ageGroup")
    last_text: Optional[str] = Field(None, alias="lastText")
    last_sent_at: Optional[datetime] = Field(None, alias="lastSentAt")
    # None, если непрочитанные не отслеживаются
    unread: Optional[int] = None

    class Config:
        validate_by_name = True


class ThreadListResponse(BaseModel):
    ok: bool = True
    threads: List[MessageThread]
    limit: int
    offset: int
