from accounts.handlers.views import LogInView, MeView, SignUpView

__all__ = ["SignUpView", "LogInView", "MeView"]
