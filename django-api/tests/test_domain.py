"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timezone
from uuid import UUID

import pytest

from events.domain import MAX_CAPACITY, Capacity, Event, EventId, EventStatus, UserId
from events.domain.errors import (
    CapacityBelowRosterError,
    ErrorCode,
    ErrorKind,
    EventFullError,
    EventNotFoundError,
    LockTimeoutError,
)


def _event(capacity: int, participants: tuple[int, ...] = ()) -> Event:
    now = datetime.now(timezone.utc)
    return Event(
        id=EventId.new(),
        title="Chess Night",
        description="Blitz rounds",
        date="2026-12-01",
        time="19:00",
        venue="Library",
        organizer="Chess Society",
        max_participants=Capacity(capacity),
        status=EventStatus.UPCOMING,
        created_by=None,
        created_at=now,
        updated_at=now,
        participants=tuple(UserId(value) for value in participants),
    )


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with a positive value."""
        assert Capacity(3).value == 3

    def test_capacity_rejects_zero(self):
        """An event must admit at least one participant."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-5)

    def test_capacity_rejects_values_above_the_column_range(self):
        """Capacity must fit a 32-bit integer column."""
        assert Capacity(MAX_CAPACITY).value == MAX_CAPACITY
        with pytest.raises(ValueError):
            Capacity(MAX_CAPACITY + 1)

    def test_capacity_rejects_non_integers(self):
        """Strings, floats and booleans are not capacities."""
        for value in ("10", 2.5, True):
            with pytest.raises(ValueError):
                Capacity(value)

    def test_admits_until_full(self):
        """admits() is true only while the count is below the capacity."""
        capacity = Capacity(2)
        assert capacity.admits(0)
        assert capacity.admits(1)
        assert not capacity.admits(2)


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        raw = "5f0c6f52-3a55-4c1b-9a53-2f0c1b3c8d11"
        assert EventId.from_string(raw).value == UUID(raw)

    def test_from_string_invalid_uuid(self):
        """EventId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")

    def test_str_is_the_uuid(self):
        event_id = EventId.new()
        assert str(event_id) == str(event_id.value)


class TestEvent:
    """Tests for derived Event properties."""

    def test_participant_count_follows_roster(self):
        assert _event(5, (1, 2, 3)).participant_count == 3

    def test_is_full_at_capacity(self):
        assert _event(2, (1, 2)).is_full
        assert not _event(2, (1,)).is_full

    def test_has_participant(self):
        event = _event(5, (7,))
        assert event.has_participant(UserId(7))
        assert not event.has_participant(UserId(8))


class TestDomainErrors:
    """Tests for error codes and kinds."""

    def test_every_code_has_a_kind(self):
        """Each code maps to exactly one stable kind."""
        for code in ErrorCode:
            assert isinstance(code.kind, ErrorKind)

    def test_kinds_of_registration_failures(self):
        assert EventNotFoundError("x").kind is ErrorKind.NOT_FOUND
        assert EventFullError("x").kind is ErrorKind.CONFLICT
        assert CapacityBelowRosterError(1, 2).kind is ErrorKind.VALIDATION
        assert LockTimeoutError("x", 1.0).kind is ErrorKind.UNAVAILABLE

    def test_str_includes_code_and_message(self):
        assert str(EventFullError("x")) == "EVENT_FULL: Event is full"

    def test_errors_keep_context(self):
        error = CapacityBelowRosterError(requested=1, participant_count=4)
        assert error.requested == 1
        assert error.participant_count == 4
        assert "4" in error.message
