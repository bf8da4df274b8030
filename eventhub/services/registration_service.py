"""Registration engine: joins and leaves an event's roster under its capacity.

Each (event, user) pair is either unregistered or registered. A transition
reads the event under a row lock, checks its preconditions in a fixed order,
and then writes through the repository's conditional roster update against the
roster version it read. Where the database cannot lock the row, a lost write
means another transition committed first, so the checks are repeated on a
fresh read. Each retry follows someone else's success, which bounds the loop.
With N open slots and more than N racers, exactly N writes win and the rest
see "Event is full" on their re-read.
"""
import logging

from sqlalchemy.orm import Session

from eventhub.errors import ConflictError, RosterConflictError, ValidationError
from eventhub.models.event import Event
from eventhub.repositories.event_repository import EventRepository
from eventhub.services.authorization import Action, require
from eventhub.services.event_service import utc_today
from eventhub.services.identity_service import Principal

logger = logging.getLogger(__name__)


def _check_can_register(event: Event, principal: Principal) -> None:
    # Order matters: activity, then time, then duplicate, then capacity.
    if not event.is_active:
        raise ValidationError("This event is not active")
    if event.date < utc_today():
        raise ValidationError("Cannot register for past events")
    if event.has_participant(principal.id):
        raise ConflictError("You are already registered for this event")
    if event.is_full():
        raise ValidationError("Event is full")


def _check_can_unregister(event: Event, principal: Principal) -> None:
    if not event.has_participant(principal.id):
        raise ValidationError("You are not registered for this event")


def register(db: Session, principal: Principal, event_id: str) -> Event:
    """Add the principal to the event's roster and return the updated event."""
    repo = EventRepository(db)
    attempt = 0

    while True:
        attempt += 1
        event = repo.get_for_update(event_id)
        require(principal, Action.register, event)
        _check_can_register(event, principal)

        try:
            updated = repo.conditional_update_participants(
                event_id, event.roster_version, add_user_id=principal.id
            )
        except RosterConflictError:
            logger.warning(
                "Roster of event %s moved on before user %s registered (attempt %d), re-checking",
                event_id, principal.id, attempt,
            )
            continue

        logger.info(
            "User %s registered for event %s (%d/%s)",
            principal.id, event_id, updated.participant_count,
            updated.max_participants if updated.max_participants is not None else "unbounded",
        )
        return updated


def unregister(db: Session, principal: Principal, event_id: str) -> None:
    """Remove the principal from the event's roster.

    No capacity or date checks: leaving a past event is allowed.
    """
    repo = EventRepository(db)
    attempt = 0

    while True:
        attempt += 1
        event = repo.get_for_update(event_id)
        require(principal, Action.unregister, event)
        _check_can_unregister(event, principal)

        try:
            repo.conditional_update_participants(event_id, event.roster_version, remove_user_id=principal.id)
        except RosterConflictError:
            logger.warning(
                "Roster of event %s moved on before user %s unregistered (attempt %d), re-checking",
                event_id, principal.id, attempt,
            )
            continue

        logger.info("User %s unregistered from event %s", principal.id, event_id)
        return
