"""Caller identity as seen by the events core."""

from dataclasses import dataclass
from enum import Enum

from events.domain import UserId


class Role(str, Enum):
    ADMIN = "admin"
    PARTICIPANT = "participant"


@dataclass(frozen=True)
class Caller:
    """The resolved ``{id, role}`` pair of an authenticated request."""

    id: UserId
    role: Role

    @property
    def is_participant(self) -> bool:
        return self.role is Role.PARTICIPANT


@dataclass(frozen=True)
class User:
    """Domain representation of an account."""

    id: UserId
    name: str
    email: str
    role: Role
