"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from events.domain.value_objects import Capacity, EventId, EventStatus, RegistrationId, UserId


@dataclass(frozen=True)
class EventDraft:
    """Fields of an event that has not been stored yet."""

    title: str
    description: str
    date: str
    time: str
    venue: str
    organizer: str
    max_participants: Capacity
    status: EventStatus
    created_by: UserId | None


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    ``participants`` is the roster in registration order.
    """

    id: EventId
    title: str
    description: str
    date: str
    time: str
    venue: str
    organizer: str
    max_participants: Capacity
    status: EventStatus
    created_by: UserId | None
    created_at: datetime
    updated_at: datetime
    participants: tuple[UserId, ...] = ()

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def is_full(self) -> bool:
        return not self.max_participants.admits(self.participant_count)

    def has_participant(self, user_id: UserId) -> bool:
        return user_id in self.participants


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration."""

    id: RegistrationId
    event_id: EventId
    user_id: UserId
    registered_at: datetime


@dataclass(frozen=True)
class RegisteredEvent:
    """A live registration paired with the event it references."""

    registration: Registration
    event: Event


@dataclass(frozen=True)
class ParticipantEventView:
    """An event as seen by a participant. Derived, never stored."""

    event: Event
    is_registered: bool

    @property
    def participant_count(self) -> int:
        return self.event.participant_count
