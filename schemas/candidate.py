from typing import Optional, List
from datetime import date, datetime

from pydantic import BaseModel, Field

from .interest import InterestRead
from .need import NeedRead


class MatchAnnotation(BaseModel):
    """Существующий активный матч для пары, если он есть (left join, не фильтр)."""

    match_id: Optional[int] = Field(None, alias="matchId")
    match_status: Optional[str] = Field(None, alias="matchStatus")
    coach_ok: Optional[bool] = Field(None, alias="coachOk")
    parent_ok: Optional[bool] = Field(None, alias="parentOk")

    class Config:
        validate_by_name = True


class InterestCandidate(MatchAnnotation):
    interest_id: int = Field(..., alias="interestId")
    wrestler_id: int = Field(..., alias="wrestlerId")
    wrestler_name: str = Field(..., alias="wrestlerName")
    event_name: Optional[str] = Field(None, alias="eventName")
    event_date: Optional[date] = Field(None, alias="eventDate")
    weight_class: str = Field(..., alias="weightClass")
    age_group: str = Field(..., alias="ageGroup")
    notes: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")


class NeedCandidate(MatchAnnotation):
    need_id: int = Field(..., alias="needId")
    coach_user_id: int = Field(..., alias="coachUserId")
    team_name: Optional[str] = Field(None, alias="teamName")
    event_name: str = Field(..., alias="eventName")
    event_date: Optional[date] = Field(None, alias="eventDate")
    weight_class: str = Field(..., alias="weightClass")
    age_group: str = Field(..., alias="ageGroup")
    city: Optional[str] = None
    state: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")


class NeedCandidatesResponse(BaseModel):
    ok: bool = True
    need: NeedRead
    candidates: List[InterestCandidate]
    error: Optional[str] = None


class InterestCandidatesResponse(BaseModel):
    ok: bool = True
    interest: InterestRead
    candidates: List[NeedCandidate]
    error: Optional[str] = None
