"""Uniform response envelope shared by every endpoint."""
from typing import Any, Optional
from pydantic import BaseModel


class Envelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
    count: Optional[int] = None


def ok(data: Any = None, message: Optional[str] = None, count: Optional[int] = None) -> Envelope:
    return Envelope(success=True, message=message, data=data, count=count)


def failure(error: str) -> Envelope:
    return Envelope(success=False, error=error)
