"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/exceptions.py)
- Never contain business logic
- Never expose internal error details
"""

from typing import Any

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.policy import IsAdmin, IsParticipant, resolve_caller
from events.handlers.serializers import (
    EventSerializer,
    EventWriteSerializer,
    ParticipantEventSerializer,
    RegistrationSerializer,
)
from events.services import (
    get_analytics_service,
    get_event_service,
    get_registration_service,
)


class RoleGuardedView(APIView):
    """APIView whose permissions can differ per HTTP method.

    ``method_permissions`` maps a lower-case method name to extra permission
    classes checked after IsAuthenticated.
    """

    method_permissions: dict[str, list[type]] = {}

    def get_permissions(self):
        extra = self.method_permissions.get(self.request.method.lower(), [])
        return [IsAuthenticated(), *(permission() for permission in extra)]


def _event_patch(request: Request, partial: bool) -> dict[str, Any]:
    serializer = EventWriteSerializer(data=request.data, partial=partial)
    serializer.is_valid(raise_exception=True)
    patch = dict(serializer.validated_data)
    # Unknown keys go through so the service can reject them by name.
    patch.update({key: request.data[key] for key in request.data if key not in serializer.fields})
    return patch


class EventListView(RoleGuardedView):
    """Handler for GET/POST /api/events"""

    method_permissions = {"post": [IsAdmin]}

    def get(self, request: Request) -> Response:
        caller = resolve_caller(request.user)
        events = get_event_service().list_events()
        if caller.is_participant:
            views = get_registration_service().annotate_events_for_participant(events, caller.id)
            return Response(ParticipantEventSerializer(views, many=True).data)
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        caller = resolve_caller(request.user)
        serializer = EventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().create_event(serializer.validated_data, created_by=caller.id)
        return Response(
            {"message": "Event created successfully", "event": EventSerializer(event).data},
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(RoleGuardedView):
    """Handler for GET/PUT/PATCH/DELETE /api/events/{event_id}"""

    method_permissions = {"put": [IsAdmin], "patch": [IsAdmin], "delete": [IsAdmin]}

    def get(self, request: Request, event_id: str) -> Response:
        event = get_event_service().get_event(event_id)
        return Response(EventSerializer(event).data)

    def put(self, request: Request, event_id: str) -> Response:
        return self._update(request, event_id, partial=False)

    def patch(self, request: Request, event_id: str) -> Response:
        return self._update(request, event_id, partial=True)

    def delete(self, request: Request, event_id: str) -> Response:
        get_event_service().delete_event(event_id)
        return Response({"message": "Event deleted successfully"})

    def _update(self, request: Request, event_id: str, partial: bool) -> Response:
        event = get_event_service().update_event(event_id, _event_patch(request, partial))
        return Response({"message": "Event updated successfully", "event": EventSerializer(event).data})


class EventRegisterView(RoleGuardedView):
    """Handler for POST /api/events/{event_id}/register"""

    method_permissions = {"post": [IsParticipant]}

    def post(self, request: Request, event_id: str) -> Response:
        caller = resolve_caller(request.user)
        registration = get_registration_service().register(event_id, caller.id)
        return Response(
            {
                "message": "Successfully registered for event",
                "registration_id": str(registration.id),
            },
            status=status.HTTP_201_CREATED,
        )


class EventUnregisterView(RoleGuardedView):
    """Handler for DELETE /api/events/{event_id}/unregister

    Only the caller's own registration can be removed.
    """

    method_permissions = {"delete": [IsParticipant]}

    def delete(self, request: Request, event_id: str) -> Response:
        caller = resolve_caller(request.user)
        get_registration_service().unregister(event_id, caller.id)
        return Response({"message": "Successfully unregistered from event"})


class RegistrationListView(RoleGuardedView):
    """Handler for GET /api/registrations"""

    def get(self, request: Request) -> Response:
        caller = resolve_caller(request.user)
        registrations = get_registration_service().list_registrations_for_user(caller.id)
        return Response(RegistrationSerializer(list(registrations), many=True).data)


class AnalyticsView(RoleGuardedView):
    """Handler for GET /api/analytics"""

    method_permissions = {"get": [IsAdmin]}

    def get(self, request: Request) -> Response:
        return Response(get_analytics_service().summary().as_dict())
