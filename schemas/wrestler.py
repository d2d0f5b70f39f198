from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field


class WrestlerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100, description="Имя борца")
    last_name: Optional[str] = Field(None, max_length=100, description="Фамилия борца")
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)

    class Config:
        str_strip_whitespace = True


class WrestlerRead(BaseModel):
    id: int
    parent_user_id: int
    first_name: str
    last_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
