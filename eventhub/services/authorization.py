"""Authorization guard: the single place role and ownership are checked.

Callers must confirm the event exists before asking about it, so a missing
event always surfaces as NotFound rather than Forbidden.
"""
import enum
from typing import Optional

from eventhub.errors import AuthorizationError
from eventhub.models.event import Event
from eventhub.models.user import UserRole
from eventhub.services.identity_service import Principal


class Action(str, enum.Enum):
    create_event = "createEvent"
    update_event = "updateEvent"
    delete_event = "deleteEvent"
    list_owned_events = "listOwnedEvents"
    register = "register"
    unregister = "unregister"
    view_event = "viewEvent"
    list_events = "listEvents"
    list_my_registrations = "listMyRegistrations"


_ORGANIZER_ONLY = {Action.create_event, Action.list_owned_events}
_OWNER_ONLY = {Action.update_event, Action.delete_event}

_DENIAL_MESSAGES = {
    Action.create_event: "Only organizers can create events",
    Action.update_event: "You are not authorized to update this event",
    Action.delete_event: "You are not authorized to delete this event",
    Action.list_owned_events: "Only organizers can list their events",
}


def can_perform(principal: Principal, action: Action, event: Optional[Event] = None) -> bool:
    if action in _ORGANIZER_ONLY:
        return principal.role == UserRole.organizer
    if action in _OWNER_ONLY:
        if event is None:
            raise ValueError(f"{action.value} requires an event")
        return principal.role == UserRole.organizer and principal.id == event.organizer_id
    # Remaining actions are open to any authenticated principal
    return True


def require(principal: Principal, action: Action, event: Optional[Event] = None) -> None:
    """Raise AuthorizationError unless the principal may perform the action."""
    if not can_perform(principal, action, event):
        raise AuthorizationError(_DENIAL_MESSAGES.get(action, "You are not authorized to perform this action"))
