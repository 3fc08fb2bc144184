"""Service wiring.

Handlers build services through these factories so every request shares the
same per-event lock table.
"""

from functools import lru_cache

from django.conf import settings

from accounts.stores import DjangoUserStore
from events.services.analytics_service import AnalyticsService
from events.services.event_service import EventService
from events.services.locks import KeyedLock
from events.services.registration_service import RegistrationService
from events.stores import get_event_store, get_registration_store

__all__ = [
    "AnalyticsService",
    "EventService",
    "KeyedLock",
    "RegistrationService",
    "get_event_locks",
    "get_event_service",
    "get_registration_service",
    "get_analytics_service",
]


@lru_cache(maxsize=1)
def get_event_locks() -> KeyedLock:
    return KeyedLock(timeout=settings.REGISTRATION_LOCK_TIMEOUT)


def get_event_service() -> EventService:
    return EventService(
        events=get_event_store(),
        registrations=get_registration_store(),
        locks=get_event_locks(),
        default_capacity=settings.DEFAULT_MAX_PARTICIPANTS,
    )


def get_registration_service() -> RegistrationService:
    return RegistrationService(
        events=get_event_store(),
        registrations=get_registration_store(),
        locks=get_event_locks(),
    )


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(
        events=get_event_store(),
        registrations=get_registration_store(),
        users=DjangoUserStore(),
    )
