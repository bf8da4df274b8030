"""Domain error taxonomy, mapped to HTTP statuses by the handlers in main."""
from fastapi import status


class AppError(Exception):
    """Operational error with a stable, caller-safe message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class RosterConflictError(Exception):
    """The roster changed between read and conditional write.

    Raised by the repository only; the registration engine retries on it.
    """

    def __init__(self, event_id: str, expected_version: int):
        super().__init__(f"Roster of event {event_id} is no longer at version {expected_version}")
        self.event_id = event_id
        self.expected_version = expected_version
