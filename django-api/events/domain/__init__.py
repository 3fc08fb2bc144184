from events.domain.models import Event, EventDraft, ParticipantEventView, RegisteredEvent, Registration
from events.domain.value_objects import (
    DEFAULT_MAX_PARTICIPANTS,
    MAX_CAPACITY,
    Capacity,
    EventId,
    EventStatus,
    RegistrationId,
    UserId,
)

__all__ = [
    "Event",
    "EventDraft",
    "Registration",
    "RegisteredEvent",
    "ParticipantEventView",
    "EventId",
    "RegistrationId",
    "UserId",
    "Capacity",
    "EventStatus",
    "DEFAULT_MAX_PARTICIPANTS",
    "MAX_CAPACITY",
]
