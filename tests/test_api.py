import pytest
from fastapi.testclient import TestClient

from toegrip.config import config
from toegrip.main import app
from toegrip.services.game_service import game_service


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock(monkeypatch, tmp_path):
    fake = FakeClock()
    monkeypatch.setattr(config, "history_path", tmp_path / "sessions.json")
    monkeypatch.setattr(config, "session_duration_s", 5.0)
    monkeypatch.setattr(config, "debug_mode", "debug")
    monkeypatch.setattr(game_service, "clock", fake)
    return fake


@pytest.fixture
def client(clock):
    with TestClient(app) as test_client:
        yield test_client


def tick(client, tracking=True, angle=2.0, delta=16):
    response = client.post("/tick", json={"trackingActive": tracking, "rawAngle": angle, "deltaMs": delta})
    assert response.status_code == 200
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.json() == {"status": "healthy", "state": "waiting"}


def test_full_session_flow(client, clock):
    assert client.get("/state").json()["state"] == "waiting"

    client.post("/marker/found")
    body = tick(client)
    assert body["snapshot"]["state"] == "calibrating"

    clock.now = 1500
    assert tick(client)["snapshot"]["calibrationProgress"] == 50

    clock.now = 3000
    body = tick(client)
    assert body["snapshot"]["achievement"] == "Calibration Complete!"
    assert "calibration_complete" in [e["type"] for e in body["events"]]

    clock.now = 4000
    body = tick(client)
    snapshot = body["snapshot"]
    assert snapshot["state"] == "playing"
    assert snapshot["remainingTime"] == "0:05"
    assert snapshot["comboText"] is None
    assert {"command": "setCatcherPosition", "y": -0.15} in body["sceneCommands"]

    clock.now = 4100
    snapshot = tick(client, angle=2.0 + 22.5)["snapshot"]
    assert snapshot["curlPercent"] == 50

    clock.now = 9000
    body = tick(client)
    assert body["snapshot"]["state"] == "gameover"
    assert body["snapshot"]["finalStats"] == {"score": 0, "reps": 0, "bestHold": "0.0s"}
    assert "session_finished" in [e["type"] for e in body["events"]]

    history = client.get("/history").json()
    assert len(history) == 1
    assert history[0]["configuredDurationSeconds"] == 5.0

    client.post("/restart")
    assert tick(client)["snapshot"]["state"] == "waiting"


def test_achievement_expires(client, clock):
    client.post("/marker/found")
    tick(client)
    clock.now = 3000
    tick(client)
    clock.now = 5999
    assert client.get("/state").json()["achievement"] == "Calibration Complete!"
    clock.now = 6000
    assert client.get("/state").json()["achievement"] is None


def test_invalid_tick_body_rejected(client):
    response = client.post("/tick", json={"trackingActive": True, "rawAngle": 1.0, "deltaMs": -5})
    assert response.status_code == 422
