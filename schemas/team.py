from typing import Optional

from pydantic import BaseModel, Field


class TeamProfileUpsert(BaseModel):
    team_name: str = Field(..., alias="teamName", min_length=1, max_length=200, description="Название команды")
    coach_name: str = Field(..., alias="coachName", min_length=1, max_length=200)
    contact_email: str = Field(..., alias="contactEmail", min_length=1, max_length=255)
    logo_path: Optional[str] = Field(None, alias="logoPath", max_length=255)

    class Config:
        validate_by_name = True
        str_strip_whitespace = True


class TeamProfileRead(BaseModel):
    id: int
    team_name: str = Field(..., alias="teamName")
    coach_name: Optional[str] = Field(None, alias="coachName")
    contact_email: Optional[str] = Field(None, alias="contactEmail")
    logo_path: Optional[str] = Field(None, alias="logoPath")

    class Config:
        validate_by_name = True


class TeamProfileResponse(BaseModel):
    ok: bool = True
    team: Optional[TeamProfileRead] = None
