"""Serializers for account requests and responses."""

from rest_framework import serializers

from accounts.domain import Role


class SignUpSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(
        choices=[role.value for role in Role], default=Role.PARTICIPANT.value
    )


class LogInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class UserSerializer(serializers.Serializer):
    """Serializer for the User domain model."""

    id = serializers.IntegerField(source="id.value")
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField(source="role.value")
