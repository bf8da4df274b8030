"""Unit tests for the authorization guard."""
import pytest

from eventhub.errors import AuthorizationError
from eventhub.models.event import Event
from eventhub.models.user import UserRole
from eventhub.services.authorization import Action, can_perform, require
from eventhub.services.identity_service import Principal

OWNER = Principal(id="owner-1", role=UserRole.organizer)
OTHER_ORGANIZER = Principal(id="owner-2", role=UserRole.organizer)
ATTENDEE = Principal(id="attendee-1", role=UserRole.attendee)
# An attendee whose id happens to equal the organizer_id must still be refused.
ATTENDEE_WITH_OWNER_ID = Principal(id="owner-1", role=UserRole.attendee)

OPEN_ACTIONS = [
    Action.register,
    Action.unregister,
    Action.view_event,
    Action.list_events,
    Action.list_my_registrations,
]


@pytest.fixture
def event():
    return Event(event_id="evt-1", organizer_id=OWNER.id)


class TestRoleGates:

    @pytest.mark.parametrize("action", [Action.create_event, Action.list_owned_events])
    def test_organizer_only(self, action):
        assert can_perform(OWNER, action)
        assert can_perform(OTHER_ORGANIZER, action)
        assert not can_perform(ATTENDEE, action)

    @pytest.mark.parametrize("action", OPEN_ACTIONS)
    def test_open_to_any_principal(self, action, event):
        for principal in (OWNER, OTHER_ORGANIZER, ATTENDEE):
            assert can_perform(principal, action, event)


class TestOwnership:

    @pytest.mark.parametrize("action", [Action.update_event, Action.delete_event])
    def test_only_owning_organizer(self, action, event):
        assert can_perform(OWNER, action, event)
        assert not can_perform(OTHER_ORGANIZER, action, event)
        assert not can_perform(ATTENDEE, action, event)
        assert not can_perform(ATTENDEE_WITH_OWNER_ID, action, event)

    def test_owner_action_needs_event(self):
        with pytest.raises(ValueError):
            can_perform(OWNER, Action.update_event)


def test_require_raises_with_action_message(event):
    with pytest.raises(AuthorizationError, match="not authorized to delete"):
        require(OTHER_ORGANIZER, Action.delete_event, event)
    require(OWNER, Action.delete_event, event)
