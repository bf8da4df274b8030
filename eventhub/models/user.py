"""User ORM model: the identity behind a Principal."""
import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from eventhub.database import Base


class UserRole(str, enum.Enum):
    organizer = "organizer"
    attendee = "attendee"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.attendee)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
