"""Account sign-up and login."""

import structlog

from accounts.domain import Role, User
from accounts.stores import UserStore
from events.domain import UserId
from events.domain.errors import (
    EmailTakenError,
    ForbiddenError,
    InvalidCredentialsError,
    UserNotFoundError,
)

logger = structlog.get_logger(__name__)


class UserService:
    def __init__(self, store: UserStore, allow_admin_signup: bool = False) -> None:
        self._store = store
        self._allow_admin_signup = allow_admin_signup

    def sign_up(self, name: str, email: str, password: str, role: Role = Role.PARTICIPANT) -> User:
        """Create an account.

        Raises:
            ForbiddenError: If an admin account is requested and admin sign-up is off.
            EmailTakenError: If the email already has an account.
        """
        if role is Role.ADMIN and not self._allow_admin_signup:
            raise ForbiddenError("Admin accounts cannot be created through sign-up")
        if self._store.email_exists(email):
            raise EmailTakenError()
        user = self._store.create_user(name=name, email=email, password=password, role=role)
        logger.info("user_signed_up", user_id=str(user.id), role=user.role.value)
        return user

    def log_in(self, email: str, password: str) -> User:
        user = self._store.authenticate(email, password)
        if user is None:
            logger.info("login_failed")
            raise InvalidCredentialsError()
        logger.info("user_logged_in", user_id=str(user.id))
        return user

    def get_user(self, user_id: UserId) -> User:
        user = self._store.get_user(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user
