"""Django ORM implementation of the event and registration stores."""

import functools
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, ParamSpec, TypeVar

import structlog
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Prefetch

from events import models
from events.domain import (
    Capacity,
    Event,
    EventDraft,
    EventId,
    EventStatus,
    Registration,
    RegistrationId,
    UserId,
)
from events.domain.errors import AlreadyRegisteredError, EventNotFoundError, StoreUnavailableError
from events.stores.interfaces import EventStore, RegistrationStore

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _unavailable_on_db_error(func: Callable[P, R]) -> Callable[P, R]:
    """Surface backend failures as StoreUnavailableError."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("store_operation_failed", operation=func.__name__, error=str(exc))
            raise StoreUnavailableError(func.__name__) from exc

    return wrapper


def _roster_prefetch() -> Prefetch:
    return Prefetch(
        "registrations",
        queryset=models.Registration.objects.order_by("registered_at", "id"),
        to_attr="roster",
    )


def _to_event(instance: models.Event) -> Event:
    roster = getattr(instance, "roster", None)
    if roster is None:
        roster = instance.registrations.order_by("registered_at", "id")
    return Event(
        id=EventId(instance.id),
        title=instance.title,
        description=instance.description,
        date=instance.date,
        time=instance.time,
        venue=instance.venue,
        organizer=instance.organizer,
        max_participants=Capacity(instance.max_participants),
        status=EventStatus(instance.status),
        created_by=UserId(instance.created_by_id) if instance.created_by_id is not None else None,
        created_at=instance.created_at,
        updated_at=instance.updated_at,
        participants=tuple(UserId(registration.user_id) for registration in roster),
    )


def _to_registration(instance: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(instance.id),
        event_id=EventId(instance.event_id),
        user_id=UserId(instance.user_id),
        registered_at=instance.registered_at,
    )


def _column_values(changes: Mapping[str, Any]) -> dict[str, Any]:
    values = {}
    for field, value in changes.items():
        if isinstance(value, (Capacity, UserId)):
            value = value.value
        elif isinstance(value, EventStatus):
            value = value.value
        values[field] = value
    return values


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def _queryset(self):
        return models.Event.objects.prefetch_related(_roster_prefetch())

    @_unavailable_on_db_error
    def list_events(self) -> list[Event]:
        return [_to_event(instance) for instance in self._queryset().order_by("-created_at")]

    @_unavailable_on_db_error
    def get_event(self, event_id: EventId) -> Event | None:
        instance = self._queryset().filter(pk=event_id.value).first()
        return _to_event(instance) if instance is not None else None

    @_unavailable_on_db_error
    def get_events(self, event_ids: Iterable[EventId]) -> dict[EventId, Event]:
        pks = [event_id.value for event_id in event_ids]
        return {
            EventId(instance.id): _to_event(instance)
            for instance in self._queryset().filter(pk__in=pks)
        }

    @_unavailable_on_db_error
    def event_exists(self, event_id: EventId) -> bool:
        return models.Event.objects.filter(pk=event_id.value).exists()

    @_unavailable_on_db_error
    def create_event(self, draft: EventDraft) -> Event:
        instance = models.Event.objects.create(
            title=draft.title,
            description=draft.description,
            date=draft.date,
            time=draft.time,
            venue=draft.venue,
            organizer=draft.organizer,
            max_participants=draft.max_participants.value,
            status=draft.status.value,
            created_by_id=draft.created_by.value if draft.created_by is not None else None,
        )
        instance.roster = []
        return _to_event(instance)

    @_unavailable_on_db_error
    def update_event(self, event_id: EventId, changes: Mapping[str, Any]) -> Event | None:
        instance = models.Event.objects.filter(pk=event_id.value).first()
        if instance is None:
            return None
        values = _column_values(changes)
        for field, value in values.items():
            setattr(instance, field, value)
        instance.save(update_fields=[*values, "updated_at"])
        return self.get_event(event_id)

    @_unavailable_on_db_error
    def delete_event(self, event_id: EventId) -> bool:
        _, per_model = models.Event.objects.filter(pk=event_id.value).delete()
        return per_model.get(models.Event._meta.label, 0) > 0

    @_unavailable_on_db_error
    def count_events(self, status: EventStatus | None = None) -> int:
        queryset = models.Event.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return queryset.count()


class DjangoRegistrationStore(RegistrationStore):
    """Registration store backed by the Registration through table.

    The roster is read from the same rows, so a single insert or delete
    changes both representations at once.
    """

    @contextmanager
    def atomic(self, event_id: EventId) -> Iterator[None]:
        try:
            with transaction.atomic():
                # Row lock serializes writers in other worker processes.
                list(
                    models.Event.objects.select_for_update()
                    .filter(pk=event_id.value)
                    .values_list("pk", flat=True)
                )
                yield
        except DatabaseError as exc:
            logger.error("registration_transaction_failed", event_id=str(event_id), error=str(exc))
            raise StoreUnavailableError("atomic") from exc

    @_unavailable_on_db_error
    def get_registration(self, event_id: EventId, user_id: UserId) -> Registration | None:
        instance = models.Registration.objects.filter(
            event_id=event_id.value, user_id=user_id.value
        ).first()
        return _to_registration(instance) if instance is not None else None

    @_unavailable_on_db_error
    def add_registration(self, event_id: EventId, user_id: UserId) -> Registration:
        if not models.Event.objects.filter(pk=event_id.value).exists():
            raise EventNotFoundError(str(event_id))
        try:
            with transaction.atomic():
                instance = models.Registration.objects.create(
                    event_id=event_id.value, user_id=user_id.value
                )
        except IntegrityError as exc:
            raise AlreadyRegisteredError(str(event_id), str(user_id)) from exc
        return _to_registration(instance)

    @_unavailable_on_db_error
    def remove_registration(self, event_id: EventId, user_id: UserId) -> bool:
        deleted, _ = models.Registration.objects.filter(
            event_id=event_id.value, user_id=user_id.value
        ).delete()
        return deleted > 0

    @_unavailable_on_db_error
    def list_registrations_for_user(self, user_id: UserId) -> list[Registration]:
        queryset = models.Registration.objects.filter(user_id=user_id.value).order_by(
            "-registered_at", "-id"
        )
        return [_to_registration(instance) for instance in queryset]

    @_unavailable_on_db_error
    def registered_event_ids(self, user_id: UserId) -> set[EventId]:
        pks = models.Registration.objects.filter(user_id=user_id.value).values_list("event_id", flat=True)
        return {EventId(pk) for pk in pks}

    @_unavailable_on_db_error
    def delete_registrations_for_event(self, event_id: EventId) -> int:
        deleted, _ = models.Registration.objects.filter(event_id=event_id.value).delete()
        return deleted

    @_unavailable_on_db_error
    def dangling_event_ids(self) -> set[EventId]:
        pks = (
            models.Registration.objects.exclude(event_id__in=models.Event.objects.values("pk"))
            .values_list("event_id", flat=True)
            .distinct()
        )
        return {EventId(pk) for pk in pks}

    @_unavailable_on_db_error
    def count_registrations(self) -> int:
        return models.Registration.objects.filter(event_id__in=models.Event.objects.values("pk")).count()
