"""FastAPI dependencies resolving the calling Principal."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.services.identity_service import Principal, resolve_principal

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    token = credentials.credentials if credentials else None
    return resolve_principal(db, token)
