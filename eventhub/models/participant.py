"""EventParticipant ORM model: one roster entry per (event, user)."""
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from eventhub.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventParticipant(Base):
    __tablename__ = "event_participants"

    # Composite key: a user appears at most once in a roster.
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True, index=True)
    registered_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    event = relationship("Event", back_populates="participants")
    user = relationship("User", lazy="selectin")
