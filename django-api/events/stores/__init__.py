"""Store selection.

``EVENT_STORE_BACKEND`` picks the implementation: ``django`` (default) or
``memory`` for a process-local store.
"""

from functools import lru_cache

from django.conf import settings

from events.stores.django_store import DjangoEventStore, DjangoRegistrationStore
from events.stores.interfaces import EventStore, RegistrationStore
from events.stores.memory_store import InMemoryStore

__all__ = [
    "EventStore",
    "RegistrationStore",
    "DjangoEventStore",
    "DjangoRegistrationStore",
    "InMemoryStore",
    "get_event_store",
    "get_registration_store",
]


@lru_cache(maxsize=1)
def _memory_store() -> InMemoryStore:
    return InMemoryStore()


def _backend() -> str:
    backend = getattr(settings, "EVENT_STORE_BACKEND", "django")
    if backend not in {"django", "memory"}:
        raise ValueError(f"Unknown EVENT_STORE_BACKEND: {backend!r}")
    return backend


def get_event_store() -> EventStore:
    if _backend() == "memory":
        return _memory_store()
    return DjangoEventStore()


def get_registration_store() -> RegistrationStore:
    if _backend() == "memory":
        return _memory_store()
    return DjangoRegistrationStore()
