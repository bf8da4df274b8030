"""Event repository: persistence for the Event aggregate.

The roster is the contended part of the aggregate, so it is never written by
loading, mutating and saving the ORM object. Every roster change goes through
``conditional_update_participants``, which bumps ``roster_version`` only if it
still holds the value the caller observed, in the same transaction as the
participant row change.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session

from eventhub.errors import NotFoundError, RosterConflictError
from eventhub.models.event import Event
from eventhub.models.participant import EventParticipant

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset(
    {"title", "description", "date", "time", "location", "max_participants", "is_active"}
)


def escape_like(term: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class EventFilter:
    search: Optional[str] = None
    on_date: Optional[date] = None
    is_active: Optional[bool] = None
    organizer_id: Optional[str] = None
    participant_id: Optional[str] = None


class EventRepository:
    """SQLAlchemy-backed store of Event aggregates."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, event_id: str) -> Optional[Event]:
        return self.db.get(Event, event_id, populate_existing=True)

    def get(self, event_id: str) -> Event:
        event = self.find_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def get_for_update(self, event_id: str) -> Event:
        """Load an event and lock its row until the transaction ends.

        Roster writers on the same event queue here, so the checks that follow
        run against the state they are about to change. SQLite has no row
        locks; there the conditional write alone decides.
        """
        event = self.db.get(Event, event_id, populate_existing=True, with_for_update=True)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def find_many(self, criteria: Optional[EventFilter] = None) -> list[Event]:
        """Return matching events ordered by date, then time."""
        criteria = criteria or EventFilter()
        query = select(Event)
        if criteria.search:
            pattern = f"%{escape_like(criteria.search)}%"
            query = query.where(
                or_(Event.title.ilike(pattern, escape="\\"), Event.description.ilike(pattern, escape="\\"))
            )
        if criteria.on_date is not None:
            query = query.where(Event.date == criteria.on_date)
        if criteria.is_active is not None:
            query = query.where(Event.is_active == criteria.is_active)
        if criteria.organizer_id:
            query = query.where(Event.organizer_id == criteria.organizer_id)
        if criteria.participant_id:
            query = query.where(
                Event.participants.any(EventParticipant.user_id == criteria.participant_id)
            )
        return list(self.db.scalars(query.order_by(Event.date, Event.time)).all())

    def create(self, **fields: Any) -> Event:
        event = Event(**fields)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def update(self, event: Event, patch: dict[str, Any], expected_version: Optional[int] = None) -> Event:
        """Apply a field patch.

        With ``expected_version`` the write also claims the roster version, so a
        capacity change cannot interleave with a registration.
        """
        values = {k: v for k, v in patch.items() if k in PATCHABLE_FIELDS}
        stmt = update(Event).where(Event.event_id == event.event_id)
        if expected_version is not None:
            stmt = stmt.where(Event.roster_version == expected_version)
            values["roster_version"] = Event.roster_version + 1
        values["updated_at"] = func.now()

        result = self.db.execute(stmt.values(**values).execution_options(synchronize_session=False))
        if result.rowcount == 0:
            self._raise_missed_write(event.event_id, expected_version)
        self.db.commit()
        return self.get(event.event_id)

    def delete(self, event: Event) -> None:
        self.db.delete(event)
        self.db.commit()

    def conditional_update_participants(
        self,
        event_id: str,
        expected_version: int,
        add_user_id: Optional[str] = None,
        remove_user_id: Optional[str] = None,
    ) -> Event:
        """Atomically add and/or remove one roster entry.

        Raises RosterConflictError when another writer got there first, and
        NotFoundError when the event has been deleted meanwhile.
        """
        claimed = self.db.execute(
            update(Event)
            .where(Event.event_id == event_id, Event.roster_version == expected_version)
            .values(roster_version=Event.roster_version + 1, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            self._raise_missed_write(event_id, expected_version)

        if remove_user_id is not None:
            # Synchronized delete, so a later re-add in this session gets a clean identity
            self.db.execute(
                delete(EventParticipant)
                .where(EventParticipant.event_id == event_id, EventParticipant.user_id == remove_user_id)
            )
        if add_user_id is not None:
            self.db.add(
                EventParticipant(
                    event_id=event_id,
                    user_id=add_user_id,
                    registered_at=datetime.now(timezone.utc),
                )
            )
        self.db.commit()
        return self.get(event_id)

    def _raise_missed_write(self, event_id: str, expected_version: Optional[int]) -> None:
        self.db.rollback()
        logger.debug("Conditional write on event %s missed (expected roster version %s)", event_id, expected_version)
        if self.find_by_id(event_id) is None:
            raise NotFoundError("Event not found")
        raise RosterConflictError(event_id, expected_version)
