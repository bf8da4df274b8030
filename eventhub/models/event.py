"""Event ORM model: the aggregate root owning the participant roster."""
import uuid
from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventhub.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM, 24-hour
    location = Column(String(255), nullable=False)
    organizer_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    max_participants = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    # Bumped on every roster write; conditional updates compare against it.
    roster_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    organizer = relationship("User", lazy="selectin")
    participants = relationship(
        "EventParticipant",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventParticipant.registered_at",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("max_participants IS NULL OR max_participants >= 1", name="check_max_participants_positive"),
        Index("ix_events_organizer_id", "organizer_id"),
        Index("ix_events_date", "date"),
        Index("ix_events_is_active", "is_active"),
    )

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    def has_participant(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def is_full(self) -> bool:
        return self.max_participants is not None and len(self.participants) >= self.max_participants

    def __repr__(self) -> str:
        cap = self.max_participants if self.max_participants is not None else "∞"
        return f"<Event(event_id={self.event_id}, title={self.title}, roster={self.participant_count}/{cap})>"
