import pytest
from fastapi.testclient import TestClient

from conftest import SATURDAY, FakeClock, RecordingNudger, at
from keep_active.webapp import create_app


@pytest.fixture
def client(clock) -> TestClient:
    # Used without a context manager so the background loop is not started.
    return TestClient(create_app(nudger=RecordingNudger(), clock=clock))


def test_status_reports_decision_and_countdown(client):
    payload = client.get("/api/status").json()
    assert payload["running"] is False
    assert payload["failure"] is None
    assert payload["decision"] == {"kind": "active", "reason": "ACTIVE", "paused": False}
    assert payload["auto_pause"]["duration_minutes"] == 30.0
    assert payload["auto_pause"]["armed"] is False
    assert payload["auto_pause"]["remaining_seconds"] is None


def test_weekend_status():
    client = TestClient(create_app(nudger=RecordingNudger(), clock=FakeClock(at(SATURDAY, 10))))
    decision = client.get("/api/status").json()["decision"]
    assert decision["kind"] == "paused_weekend"
    assert decision["paused"] is True


def test_toggle_arms_countdown(client, clock):
    payload = client.post("/api/auto-pause/toggle").json()
    assert payload["auto_pause"]["armed"] is True
    assert payload["auto_pause"]["remaining_seconds"] == 1800.0
    clock.advance(minutes=31)
    decision = client.get("/api/status").json()["decision"]
    assert decision["kind"] == "paused_auto_pause"


def test_force_resume_pauses_immediately(client):
    payload = client.post("/api/auto-pause/force-resume").json()
    assert payload["decision"]["kind"] == "paused_auto_pause"
    assert payload["auto_pause"]["remaining_seconds"] == 0.0


def test_set_duration_is_clamped(client):
    payload = client.put("/api/auto-pause/duration", json={"minutes": 2000}).json()
    assert payload["auto_pause"]["duration_minutes"] == 720.0


def test_set_duration_rejects_non_positive(client):
    response = client.put("/api/auto-pause/duration", json={"minutes": 0})
    assert response.status_code == 400


def test_set_duration_rejects_unknown_fields(client):
    response = client.put("/api/auto-pause/duration", json={"minutes": 5, "hours": 1})
    assert response.status_code == 422


def test_reset_disarms(client):
    client.post("/api/auto-pause/toggle")
    payload = client.post("/api/auto-pause/reset").json()
    assert payload["auto_pause"]["armed"] is False
    assert payload["auto_pause"]["duration_minutes"] == 30.0
