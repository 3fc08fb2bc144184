"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from events.domain.value_objects import DEFAULT_MAX_PARTICIPANTS


class Event(models.Model):
    """Persistence model for events."""

    class Status(models.TextChoices):
        UPCOMING = "upcoming", "Upcoming"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField()
    date = models.CharField(max_length=32)
    time = models.CharField(max_length=32)
    venue = models.CharField(max_length=255)
    organizer = models.CharField(max_length=255)
    max_participants = models.PositiveIntegerField(
        default=DEFAULT_MAX_PARTICIPANTS, validators=[MinValueValidator(1)]
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.UPCOMING)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="Registration",
        related_name="registered_events",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="events_created_idx"),
            models.Index(fields=["status"], name="events_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Registration(models.Model):
    """Persistence model for event registrations.

    Doubles as the through table of Event.participants, so a roster entry
    cannot exist without its registration row.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations"
    )
    registered_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-registered_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="unique_event_registration"),
        ]
        indexes = [
            models.Index(fields=["user", "-registered_at"], name="registrations_user_idx"),
            models.Index(fields=["event", "registered_at"], name="registrations_event_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} - {self.event_id}"
