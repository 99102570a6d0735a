"""
Name: HTTP Route Tests

Responsibilities:
  - Exercise /v1 endpoints end to end with the fake provider
  - Verify request validation and RFC 7807 error shapes
  - Verify degraded mode (LLM_PROVIDER=none) still answers 200

Notes:
  - TestClient is used as a context manager so lifespan runs
  - conftest clears cached singletons around every test
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from herbal_diagnosis.application.use_cases import GetDiagnosisHistoryUseCase
from herbal_diagnosis.container import get_history_use_case
from herbal_diagnosis.domain.repositories import DiagnosisHistoryRepository
from herbal_diagnosis.main import create_app

RHYTHM_BODY = {
    "symptoms": ["irregular periods", "hot flushes"],
    "answers": {"M6": True, "M7": True, "M8": True, "M9": True, "F1": False},
}


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def _assert_problem(response, status, code):
    assert response.status_code == status
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["status"] == status
    assert body["code"] == code
    assert body["type"].endswith("/" + code.lower())
    return body


@pytest.mark.unit
class TestDiagnoseEndpoint:
    def test_rag_diagnosis(self, client):
        response = client.post("/v1/diagnose", json=RHYTHM_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["diagnosis"]["category"] == "Rhythm Circulation Steam"
        assert set(body["diagnosis"]) == {
            "category",
            "statusSummary",
            "recommendedHerbs",
            "benefits",
            "advice",
            "instructions",
            "duration",
            "frequency",
            "precautions",
        }
        assert body["recipes"][0]["name"] == "Rhythm Circulation Steam Blend"
        assert body["recommendation"]["primaryRecipe"] == "Rhythm Circulation Steam"
        assert body["recommendation"]["confidence"] == 0.8
        assert body["metadata"]["ragUsed"] is True
        assert body["metadata"]["sourcesCount"] > 0
        assert body["metadata"]["llmTokens"] > 0
        assert "error" not in body["metadata"]

    def test_unknown_answer_id_rejected(self, client):
        body = {"symptoms": ["tired"], "answers": {"Z1": True}}

        problem = _assert_problem(
            client.post("/v1/diagnose", json=body), 422, "VALIDATION_ERROR"
        )
        assert any("Z1" in error["msg"] for error in problem["errors"])

    @pytest.mark.parametrize(
        "symptoms",
        [[], ["   "], ["x" * 201], ["tired"] * 51],
    )
    def test_invalid_symptoms_rejected(self, client, symptoms):
        response = client.post("/v1/diagnose", json={"symptoms": symptoms})

        _assert_problem(response, 422, "VALIDATION_ERROR")

    def test_missing_body_rejected(self, client):
        _assert_problem(client.post("/v1/diagnose", json={}), 422, "VALIDATION_ERROR")

    def test_history_round_trip(self, client):
        client.post("/v1/diagnose", json={**RHYTHM_BODY, "userId": "user-1"})

        response = client.get("/v1/history/user-1")

        assert response.status_code == 200
        (entry,) = response.json()["history"]
        assert entry["id"].startswith("diagnosis_user-1_")
        assert entry["category"] == "Rhythm Circulation Steam"
        assert entry["symptoms"] == RHYTHM_BODY["symptoms"]
        assert entry["ragUsed"] is True

    def test_anonymous_diagnosis_is_not_stored(self, client):
        client.post("/v1/diagnose", json={**RHYTHM_BODY, "userId": "  "})

        assert client.get("/v1/history/user-1").json()["history"] == []


@pytest.mark.unit
def test_degraded_mode_returns_fallback(monkeypatch):
    """R: With no provider configured every diagnosis is the rule-based fallback."""
    monkeypatch.setenv("LLM_PROVIDER", "none")

    with TestClient(create_app()) as client:
        response = client.post(
            "/v1/diagnose", json={"symptoms": ["stress at work"], "answers": {}}
        )

    assert response.status_code == 200
    body = response.json()
    assert body["diagnosis"]["category"] == "Stress & Mental Care"
    assert body["metadata"]["ragUsed"] is False
    assert body["metadata"]["sourcesCount"] == 0
    assert body["metadata"]["error"] == "Generation service not configured (status 503)"
    assert "recommendation" not in body


@pytest.mark.unit
class TestChatEndpoint:
    def test_chat_reply(self, client):
        response = client.post("/v1/chat", json={"message": "Is mugwort safe?"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["response"].startswith("Simulated advice (")
        assert "error" not in body["metadata"]

    def test_chat_with_diagnosis(self, client, sample_record):
        response = client.post(
            "/v1/chat",
            json={"message": "How long?", "diagnosis": sample_record.to_dict()},
        )

        assert response.status_code == 200

    def test_blank_message_rejected(self, client):
        _assert_problem(
            client.post("/v1/chat", json={"message": "   "}), 422, "VALIDATION_ERROR"
        )

    def test_incomplete_diagnosis_rejected(self, client):
        response = client.post(
            "/v1/chat", json={"message": "hi", "diagnosis": {"category": "x"}}
        )

        _assert_problem(response, 422, "VALIDATION_ERROR")


@pytest.mark.unit
class TestHistoryEndpoint:
    def test_blank_user_rejected(self, client):
        _assert_problem(client.get("/v1/history/%20"), 422, "VALIDATION_ERROR")

    def test_storage_failure_is_503(self, app):
        repo = Mock(spec=DiagnosisHistoryRepository)
        repo.list_recent.side_effect = ConnectionError("down")
        app.dependency_overrides[get_history_use_case] = lambda: GetDiagnosisHistoryUseCase(
            repo
        )

        with TestClient(app) as client:
            response = client.get("/v1/history/user-1")

        _assert_problem(response, 503, "STORAGE_ERROR")


@pytest.mark.unit
def test_questions_catalog(client):
    response = client.get("/v1/questions")

    assert response.status_code == 200
    questions = response.json()["questions"]
    assert len(questions) == 27
    assert questions[0] == {
        "id": "M1",
        "text": "Trouble falling asleep and waking during the night",
        "category": "autonomic-nervous",
    }


@pytest.mark.unit
def test_healthz(client):
    body = client.get("/healthz").json()

    assert body["status"] == "ok"
    assert body["services"] == {"rag": "ready", "llm": "fake-llm-v1"}
    assert body["timestamp"]
