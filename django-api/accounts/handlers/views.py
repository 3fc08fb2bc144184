"""HTTP handlers (views) for sign-up, login and the current user.

Tokens come from rest_framework.authtoken; their format is not ours.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.domain import Role, User
from accounts.handlers.serializers import LogInSerializer, SignUpSerializer, UserSerializer
from accounts.policy import resolve_caller
from accounts.services import UserService
from accounts.stores import DjangoUserStore


def get_user_service() -> UserService:
    return UserService(DjangoUserStore(), allow_admin_signup=settings.ALLOW_ADMIN_SIGNUP)


def _token_for(user: User) -> str:
    token, _ = Token.objects.get_or_create(user_id=user.id.value)
    return token.key


class SignUpView(APIView):
    """Handler for POST /api/auth/register"""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = get_user_service().sign_up(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            role=Role(data["role"]),
        )
        return Response(
            {
                "message": "User registered successfully",
                "token": _token_for(user),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LogInView(APIView):
    """Handler for POST /api/auth/login"""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = LogInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = get_user_service().log_in(**serializer.validated_data)
        return Response(
            {
                "message": "Login successful",
                "token": _token_for(user),
                "user": UserSerializer(user).data,
            }
        )


class MeView(APIView):
    """Handler for GET /api/auth/me"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        user = get_user_service().get_user(resolve_caller(request.user).id)
        return Response(UserSerializer(user).data)
