from django.urls import path

from events.handlers import (
    AnalyticsView,
    EventDetailView,
    EventListView,
    EventRegisterView,
    EventUnregisterView,
    RegistrationListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/register", EventRegisterView.as_view(), name="event-register"),
    path("events/<str:event_id>/unregister", EventUnregisterView.as_view(), name="event-unregister"),
    path("registrations", RegistrationListView.as_view(), name="registration-list"),
    path("analytics", AnalyticsView.as_view(), name="analytics"),
]
