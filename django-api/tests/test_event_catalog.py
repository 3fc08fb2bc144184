"""Integration tests for the event catalog endpoints.

Run with: pytest tests/test_event_catalog.py -v
"""

import uuid

import pytest
from rest_framework.test import APIClient

from events.domain import UserId
from events.services import get_registration_service


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_requires_authentication(self, api_client: APIClient):
        response = api_client.get("/api/events")
        assert response.status_code == 401

    def test_list_events_empty_catalog(self, admin_api: APIClient):
        """Given no events, returns empty list."""
        response = admin_api.get("/api/events")

        assert response.status_code == 200
        assert response.json() == []

    def test_admin_sees_raw_roster(self, admin_api: APIClient, stored_event, participant):
        get_registration_service().register(stored_event.id, UserId(participant.pk))

        response = admin_api.get("/api/events")

        body = response.json()
        assert body[0]["id"] == str(stored_event.id)
        assert body[0]["participants"] == [participant.pk]
        assert "is_registered" not in body[0]

    def test_participant_sees_registration_flag(
        self, participant_api: APIClient, stored_event, participant, other_participant
    ):
        get_registration_service().register(stored_event.id, UserId(other_participant.pk))

        response = participant_api.get("/api/events")

        body = response.json()
        assert body[0]["is_registered"] is False
        assert body[0]["participant_count"] == 1

        get_registration_service().register(stored_event.id, UserId(participant.pk))
        body = participant_api.get("/api/events").json()
        assert body[0]["is_registered"] is True
        assert body[0]["participant_count"] == 2


@pytest.mark.django_db
class TestEventCreate:
    """Tests for POST /api/events"""

    def test_admin_creates_event(self, admin_api: APIClient, admin, event_fields):
        response = admin_api.post("/api/events", event_fields, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Event created successfully"
        assert body["event"]["title"] == event_fields["title"]
        assert body["event"]["participants"] == []
        assert body["event"]["max_participants"] == 100
        assert body["event"]["status"] == "upcoming"
        assert body["event"]["created_by"] == admin.pk

    def test_participant_is_forbidden(self, participant_api: APIClient, event_fields):
        response = participant_api.post("/api/events", event_fields, format="json")

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_missing_fields_are_rejected(self, admin_api: APIClient):
        response = admin_api.post("/api/events", {"title": "Only a title"}, format="json")
        assert response.status_code == 400

    def test_zero_capacity_is_rejected(self, admin_api: APIClient, event_fields):
        response = admin_api.post(
            "/api/events", {**event_fields, "max_participants": 0}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CAPACITY"

    def test_oversized_capacity_is_rejected(self, admin_api: APIClient, event_fields):
        response = admin_api.post(
            "/api/events", {**event_fields, "max_participants": 10**20}, format="json"
        )

        assert response.status_code == 400
        assert "max_participants" in response.json()
        assert admin_api.get("/api/events").json() == []


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, participant_api: APIClient, stored_event):
        """Given event exists, returns event details."""
        response = participant_api.get(f"/api/events/{stored_event.id}")

        assert response.status_code == 200
        assert response.json()["title"] == stored_event.title
        assert response.json()["max_participants"] == 2

    def test_get_event_not_found(self, participant_api: APIClient):
        """Given event does not exist, returns 404."""
        response = participant_api.get(f"/api/events/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, participant_api: APIClient):
        """Given invalid UUID, returns 400."""
        response = participant_api.get("/api/events/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_EVENT_ID"


@pytest.mark.django_db
class TestEventUpdate:
    """Tests for PUT/PATCH /api/events/{id}"""

    def test_patch_updates_fields(self, admin_api: APIClient, stored_event):
        response = admin_api.patch(
            f"/api/events/{stored_event.id}", {"venue": "Quad", "status": "cancelled"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["event"]["venue"] == "Quad"
        assert response.json()["event"]["status"] == "cancelled"

    def test_put_requires_full_body(self, admin_api: APIClient, stored_event):
        response = admin_api.put(f"/api/events/{stored_event.id}", {"venue": "Quad"}, format="json")
        assert response.status_code == 400

    def test_roster_cannot_be_patched(self, admin_api: APIClient, stored_event):
        response = admin_api.patch(
            f"/api/events/{stored_event.id}", {"participants": [1, 2]}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FIELD"

    def test_capacity_below_roster_is_rejected(
        self, admin_api: APIClient, stored_event, participant, other_participant
    ):
        service = get_registration_service()
        service.register(stored_event.id, UserId(participant.pk))
        service.register(stored_event.id, UserId(other_participant.pk))

        response = admin_api.patch(
            f"/api/events/{stored_event.id}", {"max_participants": 1}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "CAPACITY_BELOW_ROSTER"

    def test_oversized_capacity_is_rejected(self, admin_api: APIClient, stored_event):
        response = admin_api.patch(
            f"/api/events/{stored_event.id}", {"max_participants": 10**20}, format="json"
        )

        assert response.status_code == 400
        assert admin_api.get(f"/api/events/{stored_event.id}").json()["max_participants"] == 2

    def test_participant_cannot_update(self, participant_api: APIClient, stored_event):
        response = participant_api.patch(
            f"/api/events/{stored_event.id}", {"venue": "Quad"}, format="json"
        )
        assert response.status_code == 403


@pytest.mark.django_db
class TestEventDelete:
    """Tests for DELETE /api/events/{id}"""

    def test_delete_cascades(self, admin_api: APIClient, participant_api: APIClient, stored_event, participant):
        get_registration_service().register(stored_event.id, UserId(participant.pk))

        response = admin_api.delete(f"/api/events/{stored_event.id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Event deleted successfully"
        assert participant_api.get("/api/registrations").json() == []
        assert admin_api.get(f"/api/events/{stored_event.id}").status_code == 404

    def test_delete_missing_event(self, admin_api: APIClient):
        response = admin_api.delete(f"/api/events/{uuid.uuid4()}")
        assert response.status_code == 404

    def test_participant_cannot_delete(self, participant_api: APIClient, stored_event):
        response = participant_api.delete(f"/api/events/{stored_event.id}")
        assert response.status_code == 403
