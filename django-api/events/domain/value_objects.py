"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID, uuid4

DEFAULT_MAX_PARTICIPANTS = 100
MAX_CAPACITY = 2_147_483_647


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId:
    """Identifier of a user as issued by the identity provider."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Positive integer bounding an event's roster, at most MAX_CAPACITY."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Capacity must be an integer")
        if self.value < 1:
            raise ValueError("Capacity must be positive")
        if self.value > MAX_CAPACITY:
            raise ValueError(f"Capacity must not exceed {MAX_CAPACITY}")

    def admits(self, count: int) -> bool:
        """Return True if one more participant fits on top of ``count``."""
        return count < self.value


class EventStatus(str, Enum):
    """Lifecycle status of an event."""

    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
