from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from carledger.schemas.common import empty_to_none


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    name: Optional[str] = Field(None, max_length=120)

    @field_validator("email")
    def normalize_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("name", mode="before")
    def blank_name(cls, v):
        return empty_to_none(v)


class UserOut(BaseModel):
    user_id: int
    email: str
    name: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
