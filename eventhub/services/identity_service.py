"""Identity context: resolves credentials into a Principal and manages accounts."""
import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.errors import AuthenticationError, ValidationError
from eventhub.models.user import User, UserRole
from eventhub.security import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    id: str
    role: UserRole

    @property
    def is_organizer(self) -> bool:
        return self.role == UserRole.organizer


def resolve_principal(db: Session, token: Optional[str]) -> Principal:
    """Turn a bearer token into a Principal, or raise AuthenticationError."""
    if not token:
        raise AuthenticationError("No token provided")

    try:
        claims = decode_access_token(token)
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token")

    user = db.get(User, claims["sub"])
    if not user:
        raise AuthenticationError("User not found")
    return Principal(id=user.user_id, role=user.role)


def sign_up(db: Session, name: str, email: str, password: str, role: UserRole = UserRole.attendee) -> tuple[User, str]:
    """Create an account and return it with a fresh token."""
    email = email.strip().lower()
    if db.scalar(select(User).where(User.email == email)):
        raise ValidationError("User with this email already exists")

    user = User(name=name.strip(), email=email, password_hash=hash_password(password), role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent sign-up with the same email
        db.rollback()
        raise ValidationError("User with this email already exists")
    db.refresh(user)
    logger.info("Registered %s user %s", user.role.value, user.user_id)
    return user, create_access_token(user.user_id)


def log_in(db: Session, email: str, password: str) -> tuple[User, str]:
    user = db.scalar(select(User).where(User.email == email.strip().lower()))
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise AuthenticationError("Invalid email or password")
    return user, create_access_token(user.user_id)
