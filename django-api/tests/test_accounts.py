"""Tests for sign-up, login and role resolution.

Run with: pytest tests/test_accounts.py -v
"""

import pytest
from rest_framework.test import APIClient

from accounts.domain import Role
from accounts.policy import resolve_caller
from accounts.services import UserService
from accounts.stores import DjangoUserStore
from events.domain import UserId
from events.domain.errors import EmailTakenError, ForbiddenError, InvalidCredentialsError, UserNotFoundError

SIGN_UP = {"name": "Riley Student", "email": "riley@campus.edu", "password": "secret-pass"}


@pytest.mark.django_db
class TestUserService:
    """Tests for UserService against the Django user store."""

    def test_sign_up_creates_participant(self):
        user = UserService(DjangoUserStore()).sign_up(**SIGN_UP)

        assert user.role is Role.PARTICIPANT
        assert user.name == "Riley Student"

    def test_duplicate_email_is_rejected(self):
        service = UserService(DjangoUserStore())
        service.sign_up(**SIGN_UP)

        with pytest.raises(EmailTakenError):
            service.sign_up(**{**SIGN_UP, "email": "RILEY@campus.edu"})

    def test_admin_sign_up_is_off_by_default(self):
        with pytest.raises(ForbiddenError):
            UserService(DjangoUserStore()).sign_up(**SIGN_UP, role=Role.ADMIN)

    def test_admin_sign_up_when_enabled(self):
        user = UserService(DjangoUserStore(), allow_admin_signup=True).sign_up(**SIGN_UP, role=Role.ADMIN)
        assert user.role is Role.ADMIN

    def test_log_in_checks_password(self):
        service = UserService(DjangoUserStore())
        created = service.sign_up(**SIGN_UP)

        assert service.log_in("riley@campus.edu", "secret-pass").id == created.id
        with pytest.raises(InvalidCredentialsError):
            service.log_in("riley@campus.edu", "wrong")
        with pytest.raises(InvalidCredentialsError):
            service.log_in("nobody@campus.edu", "secret-pass")

    def test_get_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            UserService(DjangoUserStore()).get_user(UserId(999_999))


@pytest.mark.django_db
class TestRoleResolution:
    """Staff accounts are admins; everyone else is a participant."""

    def test_staff_is_admin(self, admin):
        caller = resolve_caller(admin)
        assert caller.role is Role.ADMIN
        assert caller.id == UserId(admin.pk)

    def test_regular_user_is_participant(self, participant):
        assert resolve_caller(participant).is_participant


@pytest.mark.django_db
class TestAuthEndpoints:
    """Tests for /api/auth/*"""

    def test_register_returns_token(self, api_client: APIClient):
        response = api_client.post("/api/auth/register", SIGN_UP, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "riley@campus.edu"
        assert body["user"]["role"] == "participant"
        assert body["token"]

    def test_register_duplicate_email(self, api_client: APIClient):
        api_client.post("/api/auth/register", SIGN_UP, format="json")

        response = api_client.post("/api/auth/register", SIGN_UP, format="json")

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_TAKEN"

    def test_register_as_admin_is_forbidden(self, api_client: APIClient):
        response = api_client.post("/api/auth/register", {**SIGN_UP, "role": "admin"}, format="json")
        assert response.status_code == 403

    def test_short_password_is_rejected(self, api_client: APIClient):
        response = api_client.post("/api/auth/register", {**SIGN_UP, "password": "123"}, format="json")
        assert response.status_code == 400

    def test_login_token_authenticates(self, api_client: APIClient):
        api_client.post("/api/auth/register", SIGN_UP, format="json")

        response = api_client.post(
            "/api/auth/login", {"email": SIGN_UP["email"], "password": SIGN_UP["password"]}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Login successful"
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Token {response.json()['token']}")
        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == SIGN_UP["email"]

    def test_login_with_bad_password(self, api_client: APIClient):
        api_client.post("/api/auth/register", SIGN_UP, format="json")

        response = api_client.post(
            "/api/auth/login", {"email": SIGN_UP["email"], "password": "nope"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_me_requires_authentication(self, api_client: APIClient):
        assert api_client.get("/api/auth/me").status_code == 401
