"""Authentication API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.dependencies import get_current_principal
from eventhub.errors import AuthenticationError
from eventhub.models.user import User
from eventhub.schemas.envelope import Envelope, ok
from eventhub.schemas.user import AuthPayload, UserLogin, UserOut, UserRegister
from eventhub.services import identity_service
from eventhub.services.identity_service import Principal

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=Envelope, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, db: Session = Depends(get_db)):
    """Create an organizer or attendee account and return a token."""
    user, token = identity_service.sign_up(
        db, name=payload.name, email=payload.email, password=payload.password, role=payload.role
    )
    return ok(
        data=AuthPayload(user=UserOut.model_validate(user), token=token),
        message="User registered successfully",
    )


@router.post("/login", response_model=Envelope)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user, token = identity_service.log_in(db, email=payload.email, password=payload.password)
    return ok(data=AuthPayload(user=UserOut.model_validate(user), token=token), message="Login successful")


@router.get("/me", response_model=Envelope)
def me(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    """Profile of the authenticated caller."""
    user = db.get(User, principal.id)
    if not user:
        raise AuthenticationError("User not found")
    return ok(data={"user": UserOut.model_validate(user)})
