"""Pydantic schemas for Events."""
import datetime as dt
from typing import Annotated, Any, Optional
from pydantic import AliasChoices, BaseModel, BeforeValidator, Field

from eventhub.schemas.user import UserSummary


def _date_part(value: Any) -> Any:
    """Accept full ISO timestamps for `date` and keep the calendar date."""
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if isinstance(value, dt.datetime):
        return value.date()
    return value


CalendarDate = Annotated[dt.date, BeforeValidator(_date_part)]


class EventCreate(BaseModel):
    title: str
    description: str
    date: CalendarDate
    time: str
    location: str
    max_participants: Optional[int] = Field(
        None, validation_alias=AliasChoices("max_participants", "maxParticipants")
    )


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[CalendarDate] = None
    time: Optional[str] = None
    location: Optional[str] = None
    max_participants: Optional[int] = Field(
        None, validation_alias=AliasChoices("max_participants", "maxParticipants")
    )
    is_active: Optional[bool] = Field(None, validation_alias=AliasChoices("is_active", "isActive"))


class ParticipantOut(BaseModel):
    user_id: str
    registered_at: dt.datetime
    user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str
    date: dt.date
    time: str
    location: str
    organizer_id: str
    organizer: Optional[UserSummary] = None
    max_participants: Optional[int] = None
    is_active: bool
    participant_count: int
    participants: list[ParticipantOut] = []
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}
