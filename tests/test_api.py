"""HTTP tests for the session endpoints, with the AI backend faked."""

import pytest
from fastapi.testclient import TestClient

from kitchen_troubleshooting.app.dependencies import get_troubleshooting_service
from kitchen_troubleshooting.app.main import app
from kitchen_troubleshooting.repositories.session import InMemorySessionRepository
from kitchen_troubleshooting.services.escalation import EscalationCoordinator
from kitchen_troubleshooting.services.troubleshooting import TroubleshootingService

START_BODY = {
    "equipment": {
        "id": "eq-7",
        "display_name": "Combi Oven",
        "category": "cooking",
        "manufacturer": "Rational",
    },
    "issue": {"id": "issue-3", "title": "Not heating", "severity": "high"},
}


@pytest.fixture
def client(fake_llm):
    service = TroubleshootingService(
        session_repository=InMemorySessionRepository(),
        coordinator=EscalationCoordinator(fake_llm),
    )
    app.dependency_overrides[get_troubleshooting_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client) -> str:
    response = client.post("/sessions", json=START_BODY)
    return response.json()["session_id"]


class TestSessionLifecycle:
    def test_start_session(self, client):
        response = client.post("/sessions", json=START_BODY)
        assert response.status_code == 201
        body = response.json()
        assert body["phase"] == "active"
        assert [s["id"] for s in body["steps"]] == [
            "safety_check",
            "visual_inspection",
            "operational_test",
            "heating_system_test",
            "resolution",
        ]
        assert body["current_step"]["id"] == "safety_check"
        assert body["current_interactive_step"]["title"] == "🛡️ Safety Check"
        assert body["progress"]["total"] == 5
        assert body["progress"]["percentage"] == 0

    def test_get_session(self, client, session_id):
        response = client.get(f"/sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_unknown_session_is_404(self, client):
        assert client.get("/sessions/nope").status_code == 404
        assert client.post("/sessions/nope/responses", json={"option_id": "safe_to_proceed"}).status_code == 404
        assert client.post("/sessions/nope/messages", json={"text": "hello"}).status_code == 404

    def test_delete_session(self, client, session_id):
        assert client.delete(f"/sessions/{session_id}").status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404
        assert client.delete(f"/sessions/{session_id}").status_code == 404


class TestTurns:
    def test_continue_response_advances(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/responses", json={"option_id": "safe_to_proceed"})
        assert response.status_code == 200
        body = response.json()
        assert body["route"] == "CONTINUE"
        assert body["flow"]["current_step"]["id"] == "visual_inspection"
        assert body["flow"]["progress"]["completed"] == 1

    def test_gas_message_escalates(self, client, session_id, fake_llm):
        response = client.post(f"/sessions/{session_id}/messages", json={"text": "I smell gas near the burner"})
        body = response.json()
        assert body["route"] == "SAFETY"
        assert body["recommended_contact"] == "gas_safe_engineer"
        assert body["flow"]["phase"] == "escalated"
        assert body["flow"]["current_step"] is None
        assert body["flow"]["safety_flags"][0]["type"] == "gas"
        assert fake_llm.calls == []

    def test_question_goes_to_ai(self, client, session_id, fake_llm):
        response = client.post(f"/sessions/{session_id}/messages", json={"text": "Which fuse should I check?"})
        body = response.json()
        assert body["route"] == "AI"
        assert body["reply"] == "Check the condenser coils for dust."
        assert body["flow"]["phase"] == "active"
        assert len(body["flow"]["escalation_history"]) == 1
        assert len(fake_llm.calls) == 1

    def test_empty_message_rejected(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/messages", json={"text": ""})
        assert response.status_code == 422

    def test_manager_approval(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/approval",
            json={"reason": "Replace heating element", "estimated_cost": 350},
        )
        body = response.json()
        assert body["route"] == "MANAGER_APPROVAL"
        assert body["flow"]["phase"] == "escalated"
        record = body["flow"]["escalation_history"][-1]
        assert record["approval_required"] is True
        assert "350.00" in record["reason"]


class TestNavigationActions:
    def test_skip_current_step(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/actions",
            json={"action": {"type": "SKIP_STEP", "step_id": "safety_check"}},
        )
        body = response.json()
        assert response.status_code == 200
        assert body["steps"][0]["status"] == "skipped"
        assert body["current_step"]["id"] == "visual_inspection"
        assert body["progress"]["skipped"] == 1

    def test_stale_skip_is_noop(self, client, session_id):
        before = client.get(f"/sessions/{session_id}").json()
        response = client.post(
            f"/sessions/{session_id}/actions",
            json={"action": {"type": "SKIP_STEP", "step_id": "resolution"}},
        )
        assert response.json()["steps"] == before["steps"]

    def test_jump_and_go_back(self, client, session_id):
        client.post(
            f"/sessions/{session_id}/actions",
            json={"action": {"type": "NEXT_STEP", "step_id": "heating_system_test"}},
        )
        response = client.post(f"/sessions/{session_id}/actions", json={"action": {"type": "PREVIOUS_STEP"}})
        body = response.json()
        assert body["current_step"]["id"] == "operational_test"
        assert [s["status"] for s in body["steps"]] == [
            "completed", "completed", "current", "upcoming", "upcoming",
        ]

    def test_abandon_flow(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/actions",
            json={"action": {"type": "COMPLETE_FLOW", "outcome": "abandoned"}},
        )
        assert response.json()["phase"] == "abandoned"

    def test_coordinator_only_actions_rejected(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/actions",
            json={"action": {"type": "TRIGGER_SAFETY_ESCALATION", "message": "x"}},
        )
        assert response.status_code == 422

    def test_jump_with_answer_must_go_through_responses(self, client, session_id):
        response = client.post(
            f"/sessions/{session_id}/actions",
            json={"action": {"type": "NEXT_STEP", "step_id": "resolution", "response": "safe"}},
        )
        assert response.status_code == 422
        flow = client.get(f"/sessions/{session_id}").json()
        assert flow["current_step"]["id"] == "safety_check"
        assert flow["user_responses"] == []
