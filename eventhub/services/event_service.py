"""Core event service: lifecycle of the Event aggregate.

Responsibilities:
- Field invariants: length bounds, HH:MM time, date not in the past
- Authorization hook: organizers create, only the owning organizer updates/deletes
- Capacity cannot be lowered below the current roster size
- organizer_id is assigned once and never patched
"""
import logging
import re
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from eventhub.errors import RosterConflictError, ValidationError
from eventhub.models.event import Event
from eventhub.repositories.event_repository import PATCHABLE_FIELDS, EventRepository
from eventhub.services.authorization import Action, require
from eventhub.services.identity_service import Principal

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
REQUIRED_FIELDS = ("title", "description", "date", "time", "location")


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _check_length(value: str, label: str, low: int, high: int) -> None:
    if not low <= len(value) <= high:
        raise ValidationError(f"{label} must be between {low} and {high} characters")


def validate_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalise the fields present in ``fields``.

    Only keys that are present are checked, so the same routine serves full
    creation payloads and partial patches.
    """
    clean = dict(fields)
    for key in ("title", "description", "time", "location"):
        if key in clean and isinstance(clean[key], str):
            clean[key] = clean[key].strip()

    if "title" in clean:
        _check_length(clean["title"] or "", "Title", 3, 100)
    if "description" in clean:
        _check_length(clean["description"] or "", "Description", 10, 1000)
    if "location" in clean:
        if not clean["location"]:
            raise ValidationError("Event location is required")
        if len(clean["location"]) > 255:
            raise ValidationError("Location cannot exceed 255 characters")
    if "time" in clean:
        if not clean["time"] or not TIME_PATTERN.match(clean["time"]):
            raise ValidationError("Please provide a valid time in HH:MM format")
        hours, minutes = clean["time"].split(":")
        clean["time"] = f"{int(hours):02d}:{minutes}"
    if "date" in clean:
        if clean["date"] is None:
            raise ValidationError("Event date is required")
        # Date-only: an event dated today is accepted whatever its time.
        if clean["date"] < utc_today():
            raise ValidationError("Event date cannot be in the past")
    if clean.get("max_participants") is not None and clean["max_participants"] < 1:
        raise ValidationError("Maximum participants must be at least 1")
    if "is_active" in clean and clean["is_active"] is None:
        raise ValidationError("isActive must be a boolean")
    return clean


def get_event(db: Session, principal: Principal, event_id: str) -> Event:
    event = EventRepository(db).get(event_id)
    require(principal, Action.view_event, event)
    return event


def create_event(db: Session, principal: Principal, fields: dict[str, Any]) -> Event:
    """Create an event owned by the calling organizer."""
    require(principal, Action.create_event)

    missing = [name for name in REQUIRED_FIELDS if fields.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Event {missing[0]} is required")

    clean = validate_fields({k: v for k, v in fields.items() if k in PATCHABLE_FIELDS})
    clean.setdefault("is_active", True)
    event = EventRepository(db).create(organizer_id=principal.id, roster_version=0, **clean)
    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.event_id, principal.id)
    return event


def update_event(db: Session, principal: Principal, event_id: str, patch: dict[str, Any]) -> Event:
    """Apply a partial update; only the owning organizer may do this."""
    repo = EventRepository(db)
    attempt = 0

    while True:
        attempt += 1
        event = repo.get_for_update(event_id)
        require(principal, Action.update_event, event)

        clean = validate_fields({k: v for k, v in patch.items() if k in PATCHABLE_FIELDS})
        if not clean:
            return event

        expected_version = None
        if "max_participants" in clean:
            new_max = clean["max_participants"]
            if new_max is not None and new_max < event.participant_count:
                raise ValidationError(
                    f"Maximum participants cannot be lower than the {event.participant_count} already registered"
                )
            # Capacity changes are checked against the roster, so claim its version too.
            expected_version = event.roster_version

        try:
            updated = repo.update(event, clean, expected_version=expected_version)
        except RosterConflictError:
            logger.warning("Roster of event %s changed during update (attempt %d), re-checking", event_id, attempt)
            continue

        logger.info("Updated event %s fields %s", event_id, sorted(clean))
        return updated


def delete_event(db: Session, principal: Principal, event_id: str) -> None:
    """Permanently remove an event and its roster."""
    repo = EventRepository(db)
    event = repo.get(event_id)
    require(principal, Action.delete_event, event)

    participant_count = event.participant_count
    repo.delete(event)
    logger.info("Deleted event %s (%d participants dropped) by organizer %s", event_id, participant_count, principal.id)
