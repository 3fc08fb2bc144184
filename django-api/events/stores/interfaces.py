"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
Backend failures surface as StoreUnavailableError.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from contextlib import AbstractContextManager
from typing import Any

from events.domain import Event, EventDraft, EventId, EventStatus, Registration, UserId


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def get_events(self, event_ids: Iterable[EventId]) -> dict[EventId, Event]:
        """Return the existing events among ``event_ids``, keyed by ID."""
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    def create_event(self, draft: EventDraft) -> Event:
        """Persist a new event with an empty roster."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: Mapping[str, Any]) -> Event | None:
        """Apply non-roster field changes. Return None if the event is gone."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete the event record. Return False if it did not exist."""
        ...

    @abstractmethod
    def count_events(self, status: EventStatus | None = None) -> int:
        """Count events, optionally only those with ``status``."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations.

    A registration record and the matching roster entry on its event are one
    piece of state: every write below changes both or neither.
    """

    @abstractmethod
    def atomic(self, event_id: EventId) -> AbstractContextManager[None]:
        """Open a write transaction on the event's registration state.

        Writes made inside the block are rolled back if it raises.
        """
        ...

    @abstractmethod
    def get_registration(self, event_id: EventId, user_id: UserId) -> Registration | None:
        """Return the live registration for (event, user), or None."""
        ...

    @abstractmethod
    def add_registration(self, event_id: EventId, user_id: UserId) -> Registration:
        """Create a registration and append the user to the event roster."""
        ...

    @abstractmethod
    def remove_registration(self, event_id: EventId, user_id: UserId) -> bool:
        """Delete a registration and drop the user from the event roster."""
        ...

    @abstractmethod
    def list_registrations_for_user(self, user_id: UserId) -> list[Registration]:
        """Return a user's registrations ordered by registered_at descending."""
        ...

    @abstractmethod
    def registered_event_ids(self, user_id: UserId) -> set[EventId]:
        """Return the IDs of every event the user holds a registration for."""
        ...

    @abstractmethod
    def delete_registrations_for_event(self, event_id: EventId) -> int:
        """Delete every registration referencing the event. Return the count."""
        ...

    @abstractmethod
    def dangling_event_ids(self) -> set[EventId]:
        """Return event IDs that registrations reference but no event has."""
        ...

    @abstractmethod
    def count_registrations(self) -> int:
        """Count registrations whose event still exists."""
        ...
