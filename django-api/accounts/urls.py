from django.urls import path

from accounts.handlers import LogInView, MeView, SignUpView

urlpatterns = [
    path("auth/register", SignUpView.as_view(), name="auth-register"),
    path("auth/login", LogInView.as_view(), name="auth-login"),
    path("auth/me", MeView.as_view(), name="auth-me"),
]
