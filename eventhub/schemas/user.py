"""Pydantic schemas for Users and authentication."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from eventhub.models.user import UserRole


class UserRegister(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    role: UserRole = UserRole.attendee


class UserSummary(BaseModel):
    """Public contact details shown next to events."""

    user_id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    user_id: str
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AuthPayload(BaseModel):
    user: UserOut
    token: str
