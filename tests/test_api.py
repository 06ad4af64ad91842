import pytest
from fastapi.testclient import TestClient

from fakes import FakeAnalyzer, make_analysis
from main import app
from mindflow.api.dependencies import get_controller
from mindflow.features.journaling import LifecycleState, RequestLifecycleController
from mindflow.features.journaling.controller import NETWORK_ERROR_MESSAGE
from mindflow.shared.errors import NetworkFailureError


def _client_for(controller: RequestLifecycleController) -> TestClient:
    app.dependency_overrides[get_controller] = lambda: controller
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


def test_root_and_health():
    client = TestClient(app)

    assert client.get("/").json() == {"message": "Mindflow Journal Service Running"}
    health = client.get("/api/v1/health").json()
    assert health["status"] == "healthy"
    assert "model" in health


def test_submit_entry_creates_entry():
    analyzer = FakeAnalyzer([make_analysis(summary="A good day.")])
    client = _client_for(RequestLifecycleController(analyzer))

    response = client.post("/api/v1/journal/entries", json={"text": "  A good day at work.  "})

    assert response.status_code == 201
    body = response.json()
    assert body["text"] == "A good day at work."
    assert body["analysis"]["sentiment"] == "Positive"
    assert body["analysis"]["summary"] == "A good day."
    assert analyzer.calls == ["A good day at work."]


def test_submit_blank_entry_is_rejected():
    analyzer = FakeAnalyzer()
    client = _client_for(RequestLifecycleController(analyzer))

    response = client.post("/api/v1/journal/entries", json={"text": "   "})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert analyzer.calls == []


def test_failed_submission_then_retry():
    analyzer = FakeAnalyzer([NetworkFailureError("offline"), make_analysis()])
    client = _client_for(RequestLifecycleController(analyzer))

    failed = client.post("/api/v1/journal/entries", json={"text": "Rainy Sunday."})

    assert failed.status_code == 503
    error = failed.json()["error"]
    assert error["code"] == "SERVICE_UNAVAILABLE"
    assert error["message"] == NETWORK_ERROR_MESSAGE
    assert error["details"]["original_text"] == "Rainy Sunday."
    session = client.get("/api/v1/journal/session").json()
    assert session["error"]["original_text"] == "Rainy Sunday."
    assert session["is_busy"] is False

    retried = client.post("/api/v1/journal/retry")

    assert retried.status_code == 201
    assert retried.json()["text"] == "Rainy Sunday."
    assert client.get("/api/v1/journal/session").json()["error"] is None


def test_retry_without_error_is_not_found():
    client = _client_for(RequestLifecycleController(FakeAnalyzer()))

    response = client.post("/api/v1/journal/retry")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_submit_while_busy_is_conflict():
    controller = RequestLifecycleController(FakeAnalyzer())
    controller._state = LifecycleState.IN_FLIGHT
    client = _client_for(controller)

    response = client.post("/api/v1/journal/entries", json={"text": "Second thought"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_entries_and_dashboard():
    analyzer = FakeAnalyzer([
        make_analysis("Neutral", ["Anxiety"]),
        make_analysis("Positive", ["Joy"]),
        make_analysis("Positive", ["Joy", "Calm"]),
    ])
    client = _client_for(RequestLifecycleController(analyzer))
    for text in ["Interview tomorrow.", "Finished early.", "Coffee with an old friend."]:
        assert client.post("/api/v1/journal/entries", json={"text": text}).status_code == 201

    entries = client.get("/api/v1/journal/entries").json()
    assert entries["count"] == 3
    assert [entry["text"] for entry in entries["entries"]] == [
        "Coffee with an old friend.",
        "Finished early.",
        "Interview tomorrow.",
    ]

    dashboard = client.get("/api/v1/journal/dashboard").json()
    assert [(item["name"], item["count"]) for item in dashboard["emotion_frequency"]] == [
        ("Joy", 2),
        ("Calm", 1),
        ("Anxiety", 1),
    ]
    assert [(item["name"], item["count"]) for item in dashboard["sentiment_distribution"]] == [
        ("Positive", 2),
        ("Negative", 0),
        ("Neutral", 1),
    ]


def test_empty_dashboard():
    client = _client_for(RequestLifecycleController(FakeAnalyzer()))

    dashboard = client.get("/api/v1/journal/dashboard").json()

    assert dashboard["is_empty"] is True
    assert len(dashboard["sentiment_distribution"]) == 3


def test_correlation_id_is_echoed():
    client = TestClient(app)

    response = client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Correlation-ID"] == "req-42"
