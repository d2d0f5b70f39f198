from typing import Optional
from datetime import date, datetime

from pydantic import BaseModel, Field


class NeedCreate(BaseModel):
    event_name: str = Field(..., min_length=1, max_length=200, description="Название турнира")
    event_date: Optional[date] = Field(None, description="Дата турнира (YYYY-MM-DD)")
    weight_class: str = Field(..., min_length=1, max_length=20, description="Весовая категория, например '64'")
    age_group: str = Field(..., min_length=1, max_length=64, description="Возрастная группа в свободной форме")
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    class Config:
        str_strip_whitespace = True


class NeedUpdate(BaseModel):
    event_name: Optional[str] = Field(None, min_length=1, max_length=200)
    event_date: Optional[date] = None
    weight_class: Optional[str] = Field(None, min_length=1, max_length=20)
    age_group: Optional[str] = Field(None, min_length=1, max_length=64)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    is_open: Optional[bool] = Field(None, description="false закрывает запрос")

    class Config:
        str_strip_whitespace = True


class NeedRead(BaseModel):
    id: int
    coach_user_id: int
    event_name: str
    event_date: Optional[date] = None
    weight_class: str
    age_group: str
    age_group_normalized: str
    city: Optional[str] = None
    state: Optional[str] = None
    notes: Optional[str] = None
    is_open: bool
    created_at: datetime

    class Config:
        from_attributes = True
