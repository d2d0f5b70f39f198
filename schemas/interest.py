from typing import Optional
from datetime import date, datetime

from pydantic import BaseModel, Field


class InterestCreate(BaseModel):
    event_name: Optional[str] = Field(None, max_length=200, description="Турнир; пусто значит любой")
    event_date: Optional[date] = Field(None, description="Дата турнира; пусто значит любая")
    weight_class: str = Field(..., min_length=1, max_length=20, description="Весовая категория")
    age_group: str = Field(..., min_length=1, max_length=64, description="Возрастная группа в свободной форме")
    notes: Optional[str] = None

    class Config:
        str_strip_whitespace = True


class InterestUpdate(BaseModel):
    event_name: Optional[str] = Field(None, max_length=200)
    event_date: Optional[date] = None
    weight_class: Optional[str] = Field(None, min_length=1, max_length=20)
    age_group: Optional[str] = Field(None, min_length=1, max_length=64)
    notes: Optional[str] = None
    parent_ok: Optional[bool] = Field(None, description="Устаревший флаг для отображения")
    coach_ok: Optional[bool] = Field(None, description="Устаревший флаг для отображения")

    class Config:
        str_strip_whitespace = True


class InterestRead(BaseModel):
    id: int
    wrestler_id: int
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    weight_class: str
    age_group: str
    age_group_normalized: str
    notes: Optional[str] = None
    parent_ok: bool
    coach_ok: bool
    created_at: datetime

    class Config:
        from_attributes = True
