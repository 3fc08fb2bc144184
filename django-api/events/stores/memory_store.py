"""In-process implementation of the event and registration stores.

Used for tests and single-process deployments. Writes inside ``atomic`` are
journaled and undone in reverse order when the block raises.
"""

import itertools
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from events.domain import (
    Event,
    EventDraft,
    EventId,
    EventStatus,
    Registration,
    RegistrationId,
    UserId,
)
from events.domain.errors import AlreadyRegisteredError, EventNotFoundError
from events.stores.interfaces import EventStore, RegistrationStore


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore(EventStore, RegistrationStore):
    """Dictionary-backed store implementing both store interfaces."""

    def __init__(self) -> None:
        # Guards dictionary integrity only; per-event serialization is the
        # caller's job.
        self._mutex = threading.RLock()
        self._events: dict[EventId, Event] = {}
        self._registrations: dict[tuple[EventId, UserId], Registration] = {}
        self._order: dict[RegistrationId, int] = {}
        self._sequence = itertools.count()
        self._local = threading.local()

    # Transactions

    @contextmanager
    def atomic(self, event_id: EventId) -> Iterator[None]:
        if getattr(self._local, "journal", None) is not None:
            yield
            return
        journal: list[Callable[[], None]] = []
        self._local.journal = journal
        try:
            yield
        except BaseException:
            with self._mutex:
                for undo in reversed(journal):
                    undo()
            raise
        finally:
            self._local.journal = None

    def _record(self, undo: Callable[[], None]) -> None:
        journal = getattr(self._local, "journal", None)
        if journal is not None:
            journal.append(undo)

    # EventStore

    def list_events(self) -> list[Event]:
        with self._mutex:
            events = list(self._events.values())
        return sorted(events, key=lambda event: event.created_at, reverse=True)

    def get_event(self, event_id: EventId) -> Event | None:
        with self._mutex:
            return self._events.get(event_id)

    def get_events(self, event_ids: Iterable[EventId]) -> dict[EventId, Event]:
        with self._mutex:
            return {
                event_id: self._events[event_id]
                for event_id in event_ids
                if event_id in self._events
            }

    def event_exists(self, event_id: EventId) -> bool:
        with self._mutex:
            return event_id in self._events

    def create_event(self, draft: EventDraft) -> Event:
        now = _now()
        event = Event(
            id=EventId.new(),
            title=draft.title,
            description=draft.description,
            date=draft.date,
            time=draft.time,
            venue=draft.venue,
            organizer=draft.organizer,
            max_participants=draft.max_participants,
            status=draft.status,
            created_by=draft.created_by,
            created_at=now,
            updated_at=now,
        )
        with self._mutex:
            self._events[event.id] = event
        self._record(lambda: self._events.pop(event.id, None))
        return event

    def update_event(self, event_id: EventId, changes: Mapping[str, Any]) -> Event | None:
        with self._mutex:
            previous = self._events.get(event_id)
            if previous is None:
                return None
            updated = replace(previous, **changes, updated_at=_now())
            self._events[event_id] = updated
        self._record(lambda: self._events.__setitem__(event_id, previous))
        return updated

    def delete_event(self, event_id: EventId) -> bool:
        with self._mutex:
            previous = self._events.pop(event_id, None)
        if previous is None:
            return False
        self._record(lambda: self._events.__setitem__(event_id, previous))
        return True

    def count_events(self, status: EventStatus | None = None) -> int:
        with self._mutex:
            return sum(1 for event in self._events.values() if status is None or event.status == status)

    # RegistrationStore

    def get_registration(self, event_id: EventId, user_id: UserId) -> Registration | None:
        with self._mutex:
            return self._registrations.get((event_id, user_id))

    def add_registration(self, event_id: EventId, user_id: UserId) -> Registration:
        with self._mutex:
            if event_id not in self._events:
                raise EventNotFoundError(str(event_id))
            if (event_id, user_id) in self._registrations:
                raise AlreadyRegisteredError(str(event_id), str(user_id))
            registration = Registration(
                id=RegistrationId.new(),
                event_id=event_id,
                user_id=user_id,
                registered_at=_now(),
            )
            self._put_registration(registration)
            self._append_participant(event_id, user_id)
        return registration

    def remove_registration(self, event_id: EventId, user_id: UserId) -> bool:
        with self._mutex:
            registration = self._registrations.get((event_id, user_id))
            if registration is None:
                return False
            self._drop_registration(registration)
            self._remove_participant(event_id, user_id)
        return True

    def list_registrations_for_user(self, user_id: UserId) -> list[Registration]:
        with self._mutex:
            registrations = [
                registration
                for registration in self._registrations.values()
                if registration.user_id == user_id
            ]
            order = dict(self._order)
        return sorted(
            registrations,
            key=lambda registration: (registration.registered_at, order.get(registration.id, 0)),
            reverse=True,
        )

    def registered_event_ids(self, user_id: UserId) -> set[EventId]:
        with self._mutex:
            return {event_id for event_id, owner in self._registrations if owner == user_id}

    def delete_registrations_for_event(self, event_id: EventId) -> int:
        with self._mutex:
            doomed = [
                registration
                for (registered_event, _), registration in self._registrations.items()
                if registered_event == event_id
            ]
            for registration in doomed:
                self._drop_registration(registration)
                if event_id in self._events:
                    self._remove_participant(event_id, registration.user_id)
        return len(doomed)

    def dangling_event_ids(self) -> set[EventId]:
        with self._mutex:
            return {event_id for event_id, _ in self._registrations if event_id not in self._events}

    def count_registrations(self) -> int:
        with self._mutex:
            return sum(1 for event_id, _ in self._registrations if event_id in self._events)

    # Single-record writes, each journaled with its inverse.

    def _put_registration(self, registration: Registration) -> None:
        key = (registration.event_id, registration.user_id)
        self._registrations[key] = registration
        self._order[registration.id] = next(self._sequence)
        self._record(lambda: self._drop_registration(registration, journal=False))

    def _drop_registration(self, registration: Registration, journal: bool = True) -> None:
        key = (registration.event_id, registration.user_id)
        self._registrations.pop(key, None)
        position = self._order.pop(registration.id, None)
        if journal:
            self._record(lambda: self._restore_registration(registration, position))

    def _restore_registration(self, registration: Registration, position: int | None) -> None:
        self._registrations[(registration.event_id, registration.user_id)] = registration
        if position is not None:
            self._order[registration.id] = position

    def _append_participant(self, event_id: EventId, user_id: UserId) -> None:
        event = self._events[event_id]
        self._events[event_id] = replace(event, participants=(*event.participants, user_id))
        self._record(lambda: self._set_roster(event_id, event.participants))

    def _remove_participant(self, event_id: EventId, user_id: UserId) -> None:
        event = self._events.get(event_id)
        if event is None:
            return
        roster = tuple(participant for participant in event.participants if participant != user_id)
        self._events[event_id] = replace(event, participants=roster)
        self._record(lambda: self._set_roster(event_id, event.participants))

    def _set_roster(self, event_id: EventId, roster: tuple[UserId, ...]) -> None:
        event = self._events.get(event_id)
        if event is not None:
            self._events[event_id] = replace(event, participants=roster)
