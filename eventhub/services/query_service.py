"""Read-only projections over the event repository."""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from eventhub.models.event import Event
from eventhub.repositories.event_repository import EventFilter, EventRepository
from eventhub.services.authorization import Action, require
from eventhub.services.identity_service import Principal


def list_events(
    db: Session,
    principal: Principal,
    search: Optional[str] = None,
    on_date: Optional[date] = None,
    is_active: Optional[bool] = None,
) -> list[Event]:
    require(principal, Action.list_events)
    return EventRepository(db).find_many(EventFilter(search=search, on_date=on_date, is_active=is_active))


def list_my_registrations(db: Session, principal: Principal) -> list[Event]:
    """Events the caller appears on the roster of."""
    require(principal, Action.list_my_registrations)
    return EventRepository(db).find_many(EventFilter(participant_id=principal.id))


def list_my_events(db: Session, principal: Principal) -> list[Event]:
    """Events the caller organizes. Organizer role required."""
    require(principal, Action.list_owned_events)
    return EventRepository(db).find_many(EventFilter(organizer_id=principal.id))
