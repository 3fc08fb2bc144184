"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers

from events.domain import MAX_CAPACITY


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    date = serializers.CharField()
    time = serializers.CharField()
    venue = serializers.CharField()
    organizer = serializers.CharField()
    max_participants = serializers.IntegerField(source="max_participants.value")
    participants = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    created_by = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_participants(self, event) -> list[int]:
        return [participant.value for participant in event.participants]

    def get_created_by(self, event) -> int | None:
        return event.created_by.value if event.created_by is not None else None


class ParticipantEventSerializer(serializers.Serializer):
    """Serializer for ParticipantEventView: the event plus derived fields."""

    is_registered = serializers.BooleanField()
    participant_count = serializers.IntegerField()

    def to_representation(self, instance) -> dict:
        data = EventSerializer(instance.event).data
        data.update(super().to_representation(instance))
        return data


class RegistrationSerializer(serializers.Serializer):
    """Serializer for RegisteredEvent: a registration and its event."""

    id = serializers.UUIDField(source="registration.id.value")
    registered_at = serializers.DateTimeField(source="registration.registered_at")
    event = EventSerializer()


class EventWriteSerializer(serializers.Serializer):
    """Input shape for creating or patching an event.

    Capacity and status are range-checked by EventService.
    """

    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    date = serializers.CharField(max_length=32)
    time = serializers.CharField(max_length=32)
    venue = serializers.CharField(max_length=255)
    organizer = serializers.CharField(max_length=255)
    max_participants = serializers.IntegerField(required=False, max_value=MAX_CAPACITY)
    status = serializers.CharField(required=False)
