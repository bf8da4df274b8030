"""Event API routes: delegates to the services for invariant enforcement."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.dependencies import get_current_principal
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.envelope import Envelope, ok
from eventhub.schemas.event import EventCreate, EventOut, EventUpdate
from eventhub.services import event_service, query_service, registration_service
from eventhub.services.identity_service import Principal
from eventhub.services.notification_service import EventSummary, notify_registration

logger = logging.getLogger(__name__)
router = APIRouter()


def _event_list(events: list[Event]) -> Envelope:
    return ok(data={"events": [EventOut.model_validate(e) for e in events]}, count=len(events))


@router.post("", response_model=Envelope, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create a new event owned by the calling organizer."""
    event = event_service.create_event(db, principal, payload.model_dump())
    return ok(data={"event": EventOut.model_validate(event)}, message="Event created successfully")


@router.get("", response_model=Envelope)
def list_events(
    search: Optional[str] = Query(None),
    on_date: Optional[date] = Query(None, alias="date"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List events with optional filters, earliest first."""
    events = query_service.list_events(db, principal, search=search, on_date=on_date, is_active=is_active)
    return _event_list(events)


@router.get("/my-registrations", response_model=Envelope)
def my_registrations(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return _event_list(query_service.list_my_registrations(db, principal))


@router.get("/my-events", response_model=Envelope)
def my_events(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    """Events organized by the caller (organizers only)."""
    return _event_list(query_service.list_my_events(db, principal))


@router.get("/{event_id}", response_model=Envelope)
def get_event(event_id: str, principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    event = event_service.get_event(db, principal, event_id)
    return ok(data={"event": EventOut.model_validate(event)})


@router.put("/{event_id}", response_model=Envelope)
def update_event(
    event_id: str,
    payload: EventUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Partially update an event (owning organizer only)."""
    event = event_service.update_event(db, principal, event_id, payload.model_dump(exclude_unset=True))
    return ok(data={"event": EventOut.model_validate(event)}, message="Event updated successfully")


@router.delete("/{event_id}", response_model=Envelope)
def delete_event(event_id: str, principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    event_service.delete_event(db, principal, event_id)
    return ok(message="Event deleted successfully")


@router.post("/{event_id}/register", response_model=Envelope)
def register_for_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Join the event's roster; the confirmation email goes out after the response."""
    event = registration_service.register(db, principal, event_id)

    user = db.get(User, principal.id)
    if user:
        background_tasks.add_task(notify_registration, user.email, user.name, EventSummary.from_event(event))

    return ok(data={"event": EventOut.model_validate(event)}, message="Successfully registered for event")


@router.delete("/{event_id}/register", response_model=Envelope)
def unregister_from_event(
    event_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    registration_service.unregister(db, principal, event_id)
    return ok(message="Successfully unregistered from event")
