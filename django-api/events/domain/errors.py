"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum

from events.domain.value_objects import MAX_CAPACITY


class ErrorKind(Enum):
    """Stable categories that callers branch on."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION = "VALIDATION"
    UNAVAILABLE = "UNAVAILABLE"


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    EVENT_FULL = "EVENT_FULL"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    FORBIDDEN = "FORBIDDEN"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    CAPACITY_BELOW_ROSTER = "CAPACITY_BELOW_ROSTER"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    LOCK_TIMEOUT = "LOCK_TIMEOUT"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS = {
    ErrorCode.EVENT_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.ALREADY_REGISTERED: ErrorKind.CONFLICT,
    ErrorCode.EVENT_FULL: ErrorKind.CONFLICT,
    ErrorCode.EMAIL_TAKEN: ErrorKind.CONFLICT,
    ErrorCode.FORBIDDEN: ErrorKind.FORBIDDEN,
    ErrorCode.INVALID_EVENT_ID: ErrorKind.VALIDATION,
    ErrorCode.INVALID_CAPACITY: ErrorKind.VALIDATION,
    ErrorCode.CAPACITY_BELOW_ROSTER: ErrorKind.VALIDATION,
    ErrorCode.INVALID_STATUS: ErrorKind.VALIDATION,
    ErrorCode.INVALID_FIELD: ErrorKind.VALIDATION,
    ErrorCode.INVALID_CREDENTIALS: ErrorKind.VALIDATION,
    ErrorCode.LOCK_TIMEOUT: ErrorKind.UNAVAILABLE,
    ErrorCode.STORE_UNAVAILABLE: ErrorKind.UNAVAILABLE,
}


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class RegistrationNotFoundError(DomainError):
    """Raised when no live registration exists for an (event, user) pair."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.event_id = event_id
        self.user_id = user_id


class UserNotFoundError(DomainError):
    """Raised when a referenced user does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
        )
        self.user_id = user_id


class AlreadyRegisteredError(DomainError):
    """Raised when a user registers twice for the same event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            message="Already registered for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class EventFullError(DomainError):
    """Raised when an event's roster has reached its capacity."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_FULL,
            message="Event is full",
        )
        self.event_id = event_id


class EmailTakenError(DomainError):
    """Raised when signing up with an email that already has an account."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMAIL_TAKEN,
            message="User already exists",
        )


class ForbiddenError(DomainError):
    """Raised when the caller's role does not permit the operation."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidCapacityError(DomainError):
    """Raised when max_participants is not a positive integer."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CAPACITY,
            message=f"max_participants must be an integer between 1 and {MAX_CAPACITY}",
        )


class CapacityBelowRosterError(DomainError):
    """Raised when an update would shrink capacity below the current roster."""

    def __init__(self, requested: int, participant_count: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_ROSTER,
            message=(
                f"max_participants cannot be lower than the "
                f"{participant_count} current participants"
            ),
        )
        self.requested = requested
        self.participant_count = participant_count


class InvalidStatusError(DomainError):
    """Raised when an event status is not one of the known values."""

    def __init__(self, status: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATUS,
            message="status must be one of: upcoming, completed, cancelled",
        )
        self.status = status


class InvalidFieldError(DomainError):
    """Raised when a patch touches fields that cannot be edited."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            code=ErrorCode.INVALID_FIELD,
            message=f"Fields cannot be updated: {', '.join(sorted(fields))}",
        )
        self.fields = fields


class InvalidCredentialsError(DomainError):
    """Raised when an email/password pair does not match an account."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CREDENTIALS,
            message="Invalid credentials",
        )


class LockTimeoutError(DomainError):
    """Raised when an event's write region could not be entered in time."""

    def __init__(self, key: str, timeout: float) -> None:
        super().__init__(
            code=ErrorCode.LOCK_TIMEOUT,
            message="Event is busy, please try again",
        )
        self.key = key
        self.timeout = timeout


class StoreUnavailableError(DomainError):
    """Raised when the storage backend fails to complete an operation."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Storage is temporarily unavailable",
        )
        self.operation = operation
