"""Aggregate counts for the admin dashboard."""

from dataclasses import asdict, dataclass
from typing import Protocol

from events.domain import EventStatus
from events.stores.interfaces import EventStore, RegistrationStore


class UserCounter(Protocol):
    def count_users(self) -> int: ...


@dataclass(frozen=True)
class AnalyticsSummary:
    total_events: int
    upcoming_events: int
    completed_events: int
    total_users: int
    total_registrations: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class AnalyticsService:
    def __init__(self, events: EventStore, registrations: RegistrationStore, users: UserCounter) -> None:
        self._events = events
        self._registrations = registrations
        self._users = users

    def summary(self) -> AnalyticsSummary:
        return AnalyticsSummary(
            total_events=self._events.count_events(),
            upcoming_events=self._events.count_events(EventStatus.UPCOMING),
            completed_events=self._events.count_events(EventStatus.COMPLETED),
            total_users=self._users.count_users(),
            total_registrations=self._registrations.count_registrations(),
        )
