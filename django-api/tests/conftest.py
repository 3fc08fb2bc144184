"""Pytest configuration and shared fixtures."""

from collections.abc import Callable

import pytest
from rest_framework.test import APIClient

from events import services, stores
from events.domain import Event, UserId
from events.services import EventService, KeyedLock, RegistrationService, get_event_service
from events.stores import InMemoryStore

EVENT_FIELDS = {
    "title": "Robotics Club Demo Day",
    "description": "Student teams show off their autumn builds.",
    "date": "2026-11-14",
    "time": "15:00",
    "venue": "Engineering Hall 2",
    "organizer": "Robotics Club",
}


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def fresh_service_singletons():
    """Drop the cached process-wide store and lock table between tests."""
    stores._memory_store.cache_clear()
    services.get_event_locks.cache_clear()
    yield
    stores._memory_store.cache_clear()
    services.get_event_locks.cache_clear()


@pytest.fixture
def event_fields() -> dict[str, str]:
    return dict(EVENT_FIELDS)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def locks() -> KeyedLock:
    return KeyedLock(timeout=2.0)


@pytest.fixture
def event_service(store: InMemoryStore, locks: KeyedLock) -> EventService:
    return EventService(events=store, registrations=store, locks=locks)


@pytest.fixture
def registration_service(store: InMemoryStore, locks: KeyedLock) -> RegistrationService:
    return RegistrationService(events=store, registrations=store, locks=locks)


@pytest.fixture
def make_event(event_service: EventService) -> Callable[..., Event]:
    def _make_event(**overrides) -> Event:
        return event_service.create_event({**EVENT_FIELDS, **overrides}, created_by=UserId(1))

    return _make_event


@pytest.fixture
def admin(django_user_model):
    return django_user_model.objects.create_user(
        username="admin@campus.edu",
        email="admin@campus.edu",
        password="admin-pass",
        first_name="Ada Admin",
        is_staff=True,
    )


@pytest.fixture
def participant(django_user_model):
    return django_user_model.objects.create_user(
        username="pat@campus.edu",
        email="pat@campus.edu",
        password="pat-pass",
        first_name="Pat Participant",
    )


@pytest.fixture
def other_participant(django_user_model):
    return django_user_model.objects.create_user(
        username="sam@campus.edu",
        email="sam@campus.edu",
        password="sam-pass",
        first_name="Sam Participant",
    )


@pytest.fixture
def admin_api(admin) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=admin)
    return client


@pytest.fixture
def participant_api(participant) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=participant)
    return client


@pytest.fixture
def stored_event(admin) -> Event:
    """An event persisted through the configured store."""
    return get_event_service().create_event(
        {**EVENT_FIELDS, "max_participants": 2}, created_by=UserId(admin.pk)
    )
