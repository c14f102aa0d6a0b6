"""Domain errors raised by the services and mapped to HTTP in main.py.

Empty query results are not errors; services return empty lists for them.
"""
from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    ORGANIZER_NOT_FOUND = "ORGANIZER_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    ORGANIZER_ATTENDANCE = "ORGANIZER_ATTENDANCE"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventValidationError(DomainError):
    """Raised when an event draft is missing required fields."""

    def __init__(self, missing_fields: list[str], message: str = "") -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message=message or f"Missing required fields: {', '.join(missing_fields)}",
        )
        self.missing_fields = missing_fields


class OrganizerNotFoundError(DomainError):
    """Raised when an event draft references an organizer with no profile.

    Usually a sign-up whose profile has not been provisioned yet.
    """

    def __init__(self, organizer_id: str) -> None:
        super().__init__(
            code=ErrorCode.ORGANIZER_NOT_FOUND,
            message="Organizer profile not found. Please sign out and sign in again.",
        )
        self.organizer_id = organizer_id


class UserNotFoundError(DomainError):
    """Raised when the acting user has no profile."""

    def __init__(self, user_id: str) -> None:
        super().__init__(code=ErrorCode.USER_NOT_FOUND, message="User not found")
        self.user_id = user_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class OrganizerAttendanceError(DomainError):
    """Raised when an organizer tries to RSVP to their own event."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ORGANIZER_ATTENDANCE,
            message="Organizers cannot RSVP to their own event",
        )
        self.event_id = event_id


class PersistenceError(DomainError):
    """Raised when the database rejects or fails a read or write."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_FAILED, message=message)
