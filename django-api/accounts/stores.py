"""User persistence on top of django.contrib.auth.

The email doubles as the username. Staff users are admins.
"""

from abc import ABC, abstractmethod

from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction

from accounts.domain import Role, User
from events.domain import UserId
from events.domain.errors import EmailTakenError, StoreUnavailableError


def role_of(instance) -> Role:
    return Role.ADMIN if instance.is_staff else Role.PARTICIPANT


def _to_user(instance) -> User:
    return User(
        id=UserId(instance.pk),
        name=instance.first_name,
        email=instance.email,
        role=role_of(instance),
    )


class UserStore(ABC):
    """Interface for account persistence operations."""

    @abstractmethod
    def get_user(self, user_id: UserId) -> User | None:
        """Return a user by ID, or None if not found."""
        ...

    @abstractmethod
    def email_exists(self, email: str) -> bool:
        """Check if an account already uses ``email``."""
        ...

    @abstractmethod
    def create_user(self, name: str, email: str, password: str, role: Role) -> User:
        """Create an account; the password is stored hashed."""
        ...

    @abstractmethod
    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user if the password matches, else None."""
        ...

    @abstractmethod
    def count_users(self) -> int:
        """Count all accounts."""
        ...


class DjangoUserStore(UserStore):
    def __init__(self) -> None:
        self._model = get_user_model()

    def get_user(self, user_id: UserId) -> User | None:
        instance = self._model.objects.filter(pk=user_id.value).first()
        return _to_user(instance) if instance is not None else None

    def email_exists(self, email: str) -> bool:
        return self._model.objects.filter(email__iexact=email).exists()

    def create_user(self, name: str, email: str, password: str, role: Role) -> User:
        try:
            with transaction.atomic():
                instance = self._model.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    first_name=name,
                    is_staff=role is Role.ADMIN,
                )
        except IntegrityError as exc:
            raise EmailTakenError() from exc
        except DatabaseError as exc:
            raise StoreUnavailableError("create_user") from exc
        return _to_user(instance)

    def authenticate(self, email: str, password: str) -> User | None:
        instance = self._model.objects.filter(email__iexact=email).first()
        if instance is None or not instance.is_active or not instance.check_password(password):
            return None
        return _to_user(instance)

    def count_users(self) -> int:
        return self._model.objects.count()
