"""
HTTP tests for the FastAPI application using TestClient.
"""

import pytest

from conftest import FakeProviderError

VALID_BODY = {
    "message": "How does this show up day to day?",
    "history": [{"role": "model", "text": "I see your result was **Process Bottleneck**."}],
    "result": "Process Bottleneck",
}


class TestAssistantEndpoint:
    """Tests for POST /api/assistant."""

    def test_success(self, client, provider):
        response = client.post("/api/assistant", json=VALID_BODY)

        assert response.status_code == 200
        assert response.json() == {"text": "Hello"}
        assert len(provider.calls) == 1
        assert provider.calls[0]["history"][0].role == "model"

    def test_empty_message(self, client, provider):
        response = client.post("/api/assistant", json={**VALID_BODY, "message": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required"}
        assert len(provider.calls) == 0

    def test_absent_message(self, client, provider):
        response = client.post("/api/assistant", json={"history": [], "result": "Process Bottleneck"})

        assert response.status_code == 400
        assert len(provider.calls) == 0

    def test_malformed_history(self, client, provider):
        body = {**VALID_BODY, "history": [{"role": "system", "text": "x"}]}
        response = client.post("/api/assistant", json=body)

        assert response.status_code == 400
        assert "error" in response.json()
        assert len(provider.calls) == 0

    @pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
    def test_method_not_allowed(self, client, provider, method):
        response = client.request(method.upper(), "/api/assistant")

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
        assert response.headers["allow"] == "POST"
        assert len(provider.calls) == 0

    def test_upstream_auth_error(self, client, provider):
        provider.error = FakeProviderError("API key not valid. Please pass a valid API key.", status=403)

        response = client.post("/api/assistant", json=VALID_BODY)

        assert response.status_code == 403
        data = response.json()
        assert data["error"] == "API key not valid. Please pass a valid API key."
        assert "API_KEY" in data["hint"]
        assert "Traceback" not in response.text
        assert "FakeProviderError" not in response.text

    def test_upstream_error_without_status(self, client, provider):
        provider.error = RuntimeError("")

        response = client.post("/api/assistant", json=VALID_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_request_id_header(self, client):
        response = client.post("/api/assistant", json=VALID_BODY)
        assert "x-request-id" in response.headers


class TestDiagnosticEndpoints:
    """Tests for question, scoring and result routes."""

    def test_questions(self, client):
        response = client.get("/api/questions")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert data["questions"][0]["options"][0] == {
            "id": "1a",
            "text": "During hand-offs between different teams or workflow stages.",
            "category": "Process Bottleneck",
        }

    def test_score(self, client):
        answers = {
            "1": "Role & Ownership Bottleneck",
            "2": "Performance Visibility Bottleneck",
            "3": "Role & Ownership Bottleneck",
            "4": "Process Bottleneck",
        }
        response = client.post("/api/diagnostic/score", json={"answers": answers})

        assert response.status_code == 200
        data = response.json()
        assert data["result"] == "Role & Ownership Bottleneck"
        assert "ownership" in data["description"]

    def test_score_empty(self, client):
        response = client.post("/api/diagnostic/score", json={"answers": {}})
        assert response.json()["result"] == "Process Bottleneck"

    def test_score_unknown_question(self, client):
        response = client.post("/api/diagnostic/score", json={"answers": {"7": "Process Bottleneck"}})

        assert response.status_code == 400
        assert "7" in response.json()["error"]

    def test_score_invalid_category(self, client):
        response = client.post("/api/diagnostic/score", json={"answers": {"1": "Budget"}})
        assert response.status_code == 400

    def test_result_description(self, client):
        response = client.get("/api/results/VISIBILITY")

        assert response.status_code == 200
        assert response.json()["result"] == "Performance Visibility Bottleneck"

    def test_unknown_result(self, client):
        response = client.get("/api/results/unknown")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_booking(self, client):
        assert client.get("/api/booking").json()["url"].startswith("https://")


class TestSystemEndpoints:
    """Tests for health, root and error shapes."""

    def test_health(self, client):
        data = client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["components"]["questions_loaded"] == 4
        assert data["components"]["assistant"] == "configured"

    def test_root_html(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    def test_unknown_route(self, client):
        response = client.get("/api/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_security_headers(self, client):
        response = client.get("/api/health")
        assert response.headers["x-content-type-options"] == "nosniff"
