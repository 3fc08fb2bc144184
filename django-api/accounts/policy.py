"""Access policy: who may call which operation.

Resolves the authenticated Django user into a Caller and guards views by role.
"""

from rest_framework.permissions import BasePermission
from rest_framework.request import Request

from accounts.domain import Caller, Role
from accounts.stores import role_of
from events.domain import UserId
from events.domain.errors import ForbiddenError


def resolve_caller(user) -> Caller:
    return Caller(id=UserId(user.pk), role=role_of(user))


class HasRole(BasePermission):
    """Allow authenticated callers whose role is in ``roles``."""

    roles: frozenset[Role] = frozenset()
    denied_message = "Access denied"

    def has_permission(self, request: Request, view) -> bool:
        if not (request.user and request.user.is_authenticated):
            return False
        if resolve_caller(request.user).role not in self.roles:
            raise ForbiddenError(self.denied_message)
        return True


class IsAdmin(HasRole):
    roles = frozenset({Role.ADMIN})
    denied_message = "Access denied. Admin only."


class IsParticipant(HasRole):
    roles = frozenset({Role.PARTICIPANT})
    denied_message = "Access denied. Participants only."
