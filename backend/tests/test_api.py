"""
HTTP surface tests with in-memory services
"""
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from main import app
from presentation.api.v1.container import (
    get_activity_recomputer,
    get_conversation_service,
    get_interview_round_manager,
    get_stage_machine,
)


USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def client(stage_machine, round_manager, conversation_service, recomputer):
    app.dependency_overrides[get_stage_machine] = lambda: stage_machine
    app.dependency_overrides[get_interview_round_manager] = lambda: round_manager
    app.dependency_overrides[get_conversation_service] = lambda: conversation_service
    app.dependency_overrides[get_activity_recomputer] = lambda: recomputer
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def application_id(client):
    response = client.post(
        "/api/v1/applications",
        json={
            "company_id": str(uuid4()),
            "role": "Platform Engineer",
            "created_at": "2026-03-02T09:00:00+00:00",
        },
        headers=USER,
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestApplicationsApi:

    def test_requires_user_header(self, client):
        response = client.get("/api/v1/applications")
        assert response.status_code == 401

    def test_create_returns_stage_object(self, client):
        response = client.post(
            "/api/v1/applications",
            json={"company_id": str(uuid4()), "role": "SRE", "source": "recruiter_outreach"},
            headers=USER,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["stage"] == {
            "id": "recruiter_reachout",
            "name": "Recruiter Reachout",
            "type": "standard",
            "interview_round_number": None,
            "interview_data": None,
        }
        assert body["milestone"] == "exploration"

    def test_blank_role_rejected(self, client):
        response = client.post(
            "/api/v1/applications", json={"company_id": str(uuid4()), "role": "   "}, headers=USER
        )
        assert response.status_code == 422

    def test_transition_by_id(self, client, application_id):
        response = client.post(
            f"/api/v1/applications/{application_id}/transition",
            json={"to_stage": "interview_round_1", "at": "2026-03-02T10:00:00+00:00"},
            headers=USER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["changed"] is True
        assert body["application"]["stage"]["type"] == "interview_round"
        assert body["application"]["stage"]["interview_round_number"] == 1
        assert body["application"]["milestone"] == "interviewing"
        assert _parse(body["application"]["last_activity_at"]) == datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)

    def test_transition_by_stage_object(self, client, application_id):
        response = client.post(
            f"/api/v1/applications/{application_id}/transition",
            json={"to_stage": {"id": "offer", "name": "Offer", "type": "standard"}},
            headers=USER,
        )

        assert response.status_code == 200
        assert response.json()["application"]["stage"]["id"] == "offer"

    def test_invalid_stage_is_422(self, client, application_id):
        response = client.post(
            f"/api/v1/applications/{application_id}/transition",
            json={"to_stage": "interviewing"},
            headers=USER,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidStageException"
        assert response.json()["field"] == "stage"

    def test_same_stage(self, client, application_id):
        url = f"/api/v1/applications/{application_id}/transition"

        relaxed = client.post(url, json={"to_stage": "wishlist"}, headers=USER)
        strict = client.post(url, json={"to_stage": "wishlist", "strict": True}, headers=USER)

        assert relaxed.status_code == 200
        assert relaxed.json()["changed"] is False
        assert strict.status_code == 409
        assert strict.json()["error"] == "NoOpTransitionException"

    def test_naive_timestamp_is_422(self, client, application_id):
        response = client.post(
            f"/api/v1/applications/{application_id}/transition",
            json={"to_stage": "offer", "at": "2026-03-02T10:00:00"},
            headers=USER,
        )
        assert response.status_code == 422

    def test_other_users_application_is_404(self, client, application_id):
        assert client.get(f"/api/v1/applications/{application_id}", headers=OTHER_USER).status_code == 404
        assert client.get(f"/api/v1/applications/{uuid4()}", headers=USER).status_code == 404

    def test_history_newest_first(self, client, application_id):
        url = f"/api/v1/applications/{application_id}/transition"
        client.post(url, json={"to_stage": "self_review", "at": "2026-03-02T10:00:00+00:00"}, headers=USER)
        client.post(url, json={"to_stage": "hr_shortlist", "at": "2026-03-02T11:00:00+00:00"}, headers=USER)

        response = client.get(f"/api/v1/applications/{application_id}/history", headers=USER)

        assert response.status_code == 200
        assert [h["to_stage"] for h in response.json()] == ["hr_shortlist", "self_review"]

    def test_archive_hides_from_default_list(self, client, application_id):
        assert client.post(f"/api/v1/applications/{application_id}/archive", headers=USER).json()["is_archived"]

        active = client.get("/api/v1/applications", headers=USER).json()
        archived = client.get("/api/v1/applications", params={"archived": True}, headers=USER).json()

        assert active["count"] == 0
        assert [a["id"] for a in archived["applications"]] == [application_id]

        restored = client.post(f"/api/v1/applications/{application_id}/unarchive", headers=USER)
        assert restored.json()["is_archived"] is False

    def test_list_rejects_invalid_stage_filter(self, client):
        response = client.get("/api/v1/applications", params={"stage": "interview_round_0"}, headers=USER)
        assert response.status_code == 422

    def test_manual_recompute(self, client, application_id):
        response = client.post(f"/api/v1/applications/{application_id}/activity/recompute", headers=USER)

        assert response.status_code == 200
        assert response.json()["changed"] is False
        assert _parse(response.json()["last_activity_at"]) == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestInterviewsApi:

    def test_schedule_shows_in_stage_object(self, client, application_id):
        client.post(
            f"/api/v1/applications/{application_id}/transition",
            json={"to_stage": "interview_round_1", "at": "2026-03-02T10:00:00+00:00"},
            headers=USER,
        )
        scheduled = client.post(
            f"/api/v1/applications/{application_id}/interviews/1/schedule",
            json={"type": "screen", "scheduled_at": "2026-03-03T15:00:00+00:00"},
            headers=USER,
        )
        assert scheduled.status_code == 200
        assert scheduled.json()["status"] == "scheduled"

        application = client.get(f"/api/v1/applications/{application_id}", headers=USER).json()

        assert application["stage"]["interview_data"]["status"] == "scheduled"
        assert application["stage"]["interview_data"]["type"] == "screen"
        assert _parse(application["last_activity_at"]) == datetime(2026, 3, 3, 15, 0, tzinfo=timezone.utc)

    def test_plan_and_list(self, client, application_id):
        url = f"/api/v1/applications/{application_id}/interviews"
        assert client.post(url, json={"type": "dsa"}, headers=USER).status_code == 201
        assert client.post(url, json={}, headers=USER).status_code == 201

        body = client.get(url, headers=USER).json()

        assert [r["round_number"] for r in body["rounds"]] == [1, 2]
        assert body["next_round_number"] == 3

    def test_complete_before_schedule_is_422(self, client, application_id):
        base = f"/api/v1/applications/{application_id}/interviews/1"
        client.post(
            f"{base}/schedule", json={"type": "coding", "scheduled_at": "2026-03-03T15:00:00+00:00"}, headers=USER
        )

        response = client.post(f"{base}/complete", json={"completed_at": "2026-03-03T14:00:00+00:00"}, headers=USER)

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidTimestampException"

    def test_reschedule_unscheduled_is_409(self, client, application_id):
        client.post(f"/api/v1/applications/{application_id}/interviews", json={}, headers=USER)

        response = client.post(
            f"/api/v1/applications/{application_id}/interviews/1/reschedule",
            json={"scheduled_at": "2026-03-03T15:00:00+00:00"},
            headers=USER,
        )

        assert response.status_code == 409

    def test_round_zero_is_422(self, client, application_id):
        response = client.post(
            f"/api/v1/applications/{application_id}/interviews/0/schedule",
            json={"type": "screen", "scheduled_at": "2026-03-03T15:00:00+00:00"},
            headers=USER,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidRoundException"

    def test_oversized_round_is_422(self, client, application_id):
        response = client.post(
            f"/api/v1/applications/{application_id}/interviews/99999999999/schedule",
            json={"type": "screen", "scheduled_at": "2026-03-03T15:00:00+00:00"},
            headers=USER,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidRoundException"
        assert response.json()["field"] == "round_number"

    def test_reject_and_withdraw(self, client, application_id):
        base = f"/api/v1/applications/{application_id}/interviews"
        client.post(base, json={}, headers=USER)
        client.post(base, json={}, headers=USER)

        rejected = client.post(f"{base}/1/reject", json={"reason": "no fit"}, headers=USER)
        withdrawn = client.post(f"{base}/2/withdraw", headers=USER)

        assert rejected.json()["status"] == "rejected"
        assert rejected.json()["rejection_reason"] == "no fit"
        assert withdrawn.json()["status"] == "withdrawn"


class TestConversationsApi:

    def test_record_and_list(self, client, application_id):
        url = f"/api/v1/applications/{application_id}/conversations"
        for when in ("2026-03-02T12:00:00+00:00", "2026-03-02T13:00:00+00:00"):
            response = client.post(
                url,
                json={"medium": "email", "direction": "inbound", "text": "hello", "occurred_at": when},
                headers=USER,
            )
            assert response.status_code == 201

        events = client.get(url, headers=USER).json()["events"]
        application = client.get(f"/api/v1/applications/{application_id}", headers=USER).json()

        assert [_parse(e["occurred_at"]).hour for e in events] == [13, 12]
        assert _parse(application["last_activity_at"]) == datetime(2026, 3, 2, 13, 0, tzinfo=timezone.utc)


def test_health(client):
    with patch("main.health_check", AsyncMock(return_value=True)):
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
