from events.handlers.views import (
    AnalyticsView,
    EventDetailView,
    EventListView,
    EventRegisterView,
    EventUnregisterView,
    RegistrationListView,
)

__all__ = [
    "AnalyticsView",
    "EventDetailView",
    "EventListView",
    "EventRegisterView",
    "EventUnregisterView",
    "RegistrationListView",
]
