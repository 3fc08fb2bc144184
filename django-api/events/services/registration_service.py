"""Registration service - capacity and roster consistency.

Register and unregister run inside the event's exclusive region: the
per-event lock held across the store transaction, so the capacity check and
the roster write cannot interleave with another writer on the same event.
"""

from collections.abc import Iterable, Iterator

import structlog

from events.domain import Event, EventId, ParticipantEventView, RegisteredEvent, Registration, UserId
from events.domain.errors import (
    AlreadyRegisteredError,
    EventFullError,
    EventNotFoundError,
    RegistrationNotFoundError,
)
from events.services.ids import parse_event_id
from events.services.locks import KeyedLock
from events.stores.interfaces import EventStore, RegistrationStore

logger = structlog.get_logger(__name__)


class UserRegistrations:
    """Re-iterable view over a user's live registrations, newest first.

    Each iteration reads the store again. Registrations whose event no longer
    exists are skipped.
    """

    def __init__(self, events: EventStore, registrations: RegistrationStore, user_id: UserId) -> None:
        self._events = events
        self._registrations = registrations
        self.user_id = user_id

    def __iter__(self) -> Iterator[RegisteredEvent]:
        registrations = self._registrations.list_registrations_for_user(self.user_id)
        events = self._events.get_events({registration.event_id for registration in registrations})
        for registration in registrations:
            event = events.get(registration.event_id)
            if event is None:
                continue
            yield RegisteredEvent(registration=registration, event=event)


class RegistrationService:
    """Service for registering participants for events."""

    def __init__(self, events: EventStore, registrations: RegistrationStore, locks: KeyedLock) -> None:
        self._events = events
        self._registrations = registrations
        self._locks = locks

    def register(self, event_id: str | EventId, user_id: UserId) -> Registration:
        """Register a user for an event.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            AlreadyRegisteredError: If the user already holds a registration.
            EventFullError: If the roster has reached max_participants.
            LockTimeoutError: If the event stayed busy past the lock timeout.
        """
        event_id = parse_event_id(event_id)
        with self._locks.hold(event_id), self._registrations.atomic(event_id):
            event = self._events.get_event(event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))
            if self._registrations.get_registration(event_id, user_id) is not None:
                logger.info("registration_duplicate", event_id=str(event_id), user_id=str(user_id))
                raise AlreadyRegisteredError(str(event_id), str(user_id))
            if event.is_full:
                logger.info(
                    "event_full",
                    event_id=str(event_id),
                    user_id=str(user_id),
                    max_participants=event.max_participants.value,
                )
                raise EventFullError(str(event_id))
            registration = self._registrations.add_registration(event_id, user_id)

        logger.info(
            "registration_created",
            event_id=str(event_id),
            user_id=str(user_id),
            registration_id=str(registration.id),
            participant_count=event.participant_count + 1,
        )
        return registration

    def unregister(self, event_id: str | EventId, user_id: UserId) -> None:
        """Remove a user's registration for an event.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            RegistrationNotFoundError: If the user holds no live registration.
            LockTimeoutError: If the event stayed busy past the lock timeout.
        """
        event_id = parse_event_id(event_id)
        with self._locks.hold(event_id), self._registrations.atomic(event_id):
            registration = self._registrations.get_registration(event_id, user_id)
            if registration is None:
                raise RegistrationNotFoundError(str(event_id), str(user_id))
            dangling = not self._events.event_exists(event_id)
            if dangling:
                # Left over from an interrupted cascade; finish it.
                self._registrations.delete_registrations_for_event(event_id)
            else:
                self._registrations.remove_registration(event_id, user_id)

        if dangling:
            logger.warning("dangling_registrations_removed", event_id=str(event_id))
            raise RegistrationNotFoundError(str(event_id), str(user_id))
        logger.info("registration_removed", event_id=str(event_id), user_id=str(user_id))

    def list_registrations_for_user(self, user_id: UserId) -> UserRegistrations:
        """Return the user's live registrations paired with their events."""
        return UserRegistrations(self._events, self._registrations, user_id)

    def annotate_events_for_participant(
        self, events: Iterable[Event], user_id: UserId
    ) -> list[ParticipantEventView]:
        """Attach is_registered and participant_count for a participant's listing."""
        registered = self._registrations.registered_event_ids(user_id)
        return [ParticipantEventView(event=event, is_registered=event.id in registered) for event in events]
