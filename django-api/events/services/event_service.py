"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from collections.abc import Mapping
from typing import Any

import structlog

from events.domain import (
    DEFAULT_MAX_PARTICIPANTS,
    Capacity,
    Event,
    EventDraft,
    EventId,
    EventStatus,
    UserId,
)
from events.domain.errors import (
    CapacityBelowRosterError,
    EventNotFoundError,
    InvalidCapacityError,
    InvalidFieldError,
    InvalidStatusError,
)
from events.services.ids import parse_event_id
from events.services.locks import KeyedLock
from events.stores.interfaces import EventStore, RegistrationStore

logger = structlog.get_logger(__name__)

DESCRIPTIVE_FIELDS = ("title", "description", "date", "time", "venue", "organizer")
EDITABLE_FIELDS = frozenset({*DESCRIPTIVE_FIELDS, "max_participants", "status"})


def _capacity(value: Any) -> Capacity:
    try:
        return Capacity(value)
    except ValueError as exc:
        raise InvalidCapacityError() from exc


def _status(value: Any) -> EventStatus:
    if isinstance(value, EventStatus):
        return value
    try:
        return EventStatus(value)
    except ValueError as exc:
        raise InvalidStatusError(str(value)) from exc


class EventService:
    """Service for the event lifecycle: create, update, cascading delete."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        locks: KeyedLock,
        default_capacity: int = DEFAULT_MAX_PARTICIPANTS,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._locks = locks
        self._default_capacity = default_capacity

    def list_events(self) -> list[Event]:
        """Return all events, newest first."""
        return self._events.list_events()

    def get_event(self, event_id: str | EventId) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event_id = parse_event_id(event_id)
        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def create_event(self, fields: Mapping[str, Any], created_by: UserId | None) -> Event:
        """Create an event with an empty roster.

        Raises:
            InvalidCapacityError: If max_participants is not a positive integer.
            InvalidStatusError: If status is not a known value.
        """
        capacity = fields.get("max_participants")
        status = fields.get("status")
        draft = EventDraft(
            **{name: fields.get(name, "") for name in DESCRIPTIVE_FIELDS},
            max_participants=_capacity(self._default_capacity if capacity is None else capacity),
            status=EventStatus.UPCOMING if status is None else _status(status),
            created_by=created_by,
        )
        event = self._events.create_event(draft)
        logger.info(
            "event_created",
            event_id=str(event.id),
            created_by=str(created_by) if created_by is not None else None,
            max_participants=event.max_participants.value,
        )
        return event

    def update_event(self, event_id: str | EventId, patch: Mapping[str, Any]) -> Event:
        """Apply a partial update to an event's non-roster fields.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            InvalidFieldError: If the patch touches a field that cannot be edited.
            InvalidCapacityError: If max_participants is not a positive integer.
            InvalidStatusError: If status is not a known value.
            EventNotFoundError: If the event does not exist.
            CapacityBelowRosterError: If max_participants would drop below the roster size.
        """
        event_id = parse_event_id(event_id)
        rejected = sorted(set(patch) - EDITABLE_FIELDS)
        if rejected:
            raise InvalidFieldError(rejected)

        changes = dict(patch)
        if "max_participants" in changes:
            changes["max_participants"] = _capacity(changes["max_participants"])
        if "status" in changes:
            changes["status"] = _status(changes["status"])

        # Same region as register so the roster cannot grow past a new capacity.
        with self._locks.hold(event_id), self._registrations.atomic(event_id):
            event = self._events.get_event(event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))
            capacity = changes.get("max_participants")
            if capacity is not None and capacity.value < event.participant_count:
                raise CapacityBelowRosterError(capacity.value, event.participant_count)
            updated = self._events.update_event(event_id, changes)
            if updated is None:
                raise EventNotFoundError(str(event_id))

        logger.info("event_updated", event_id=str(event_id), fields=sorted(changes))
        return updated

    def delete_event(self, event_id: str | EventId) -> None:
        """Delete an event, then every registration referencing it.

        The two phases are not one transaction. If the second phase fails the
        event is already gone and its registrations dangle; calling this again
        (or sweep_dangling_registrations) finishes the job.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If neither the event nor any registration for it exists.
            StoreUnavailableError: If a phase failed; safe to retry.
        """
        event_id = parse_event_id(event_id)
        with self._locks.hold(event_id):
            deleted = self._events.delete_event(event_id)
            if deleted:
                logger.info("event_deleted", event_id=str(event_id))
            purged = self._registrations.delete_registrations_for_event(event_id)

        if not deleted and not purged:
            raise EventNotFoundError(str(event_id))
        if purged:
            logger.info(
                "event_registrations_purged",
                event_id=str(event_id),
                registrations=purged,
                resumed=not deleted,
            )

    def sweep_dangling_registrations(self) -> int:
        """Delete registrations whose event no longer exists. Return the count."""
        removed = 0
        for event_id in self._registrations.dangling_event_ids():
            with self._locks.hold(event_id):
                if self._events.event_exists(event_id):
                    continue
                removed += self._registrations.delete_registrations_for_event(event_id)
        if removed:
            logger.warning("dangling_registrations_swept", registrations=removed)
        return removed
