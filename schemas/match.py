from typing import Optional, List
from datetime import date, datetime

from pydantic import BaseModel, Field


class MatchCreate(BaseModel):
    interest_id: int = Field(..., gt=0, alias="interestId", description="ID заявки борца")
    need_id: int = Field(..., gt=0, alias="needId", description="ID запроса команды")
    side: Optional[str] = Field(None, description="'coach' или 'parent'; по умолчанию по роли")

    class Config:
        validate_by_name = True


class MatchSideRequest(BaseModel):
    side: Optional[str] = Field(None, description="'coach' или 'parent'; по умолчанию по роли")


class MatchRead(BaseModel):
    id: int
    coach_need_id: int
    wrestler_interest_id: int
    coach_user_id: int
    status: str
    coach_ok: bool
    parent_ok: bool
    confirmed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MatchEnvelope(BaseModel):
    ok: bool = True
    match: MatchRead
    already_exists: bool = Field(False, alias="alreadyExists")

    class Config:
        validate_by_name = True


class MatchView(BaseModel):
    """Матч вместе с полями запроса, заявки, борца и команды для списков и карточки."""

    id: int
    status: str
    coach_ok: bool
    parent_ok: bool
    confirmed_at: Optional[datetime] = None
    created_at: datetime

    need_id: int
    interest_id: int
    wrestler_id: int
    coach_user_id: int

    event_name: Optional[str] = None
    event_date: Optional[date] = None
    weight_class: Optional[str] = None
    age_group: Optional[str] = None
    notes: Optional[str] = None
    interest_event_name: Optional[str] = None
    interest_event_date: Optional[date] = None

    wrestler_first_name: Optional[str] = None
    wrestler_last_name: Optional[str] = None
    wrestler_city: Optional[str] = None
    wrestler_state: Optional[str] = None

    team_id: Optional[int] = None
    team_name: Optional[str] = None
    team_coach_name: Optional[str] = None
    team_logo_path: Optional[str] = None


class MatchListResponse(BaseModel):
    ok: bool = True
    matches: List[MatchView]
    total: int


class MatchDetailResponse(BaseModel):
    ok: bool = True
    match: MatchView
