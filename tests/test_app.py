"""Tests for the service shell: health, root and middleware headers."""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"] == {
        "database": "connected",
        "booking_policy": "defaults",
        "policy_watcher": "static",
        "completion_scheduler": "stopped",
    }


def test_health_with_policy_file(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from campus_booking.config import settings
    from campus_booking.main import app

    policy_path = tmp_path / "booking_policy.yaml"
    policy_path.write_text('opening_time: "07:00"\nclosing_time: "23:00"\n')
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'health.db'}")
    monkeypatch.setattr(settings, "booking_policy_path", policy_path)

    with TestClient(app) as client:
        checks = client.get("/health").json()["checks"]
        policy = app.state.policy_manager.get_policy()

    assert checks["booking_policy"] == str(policy_path)
    assert policy.closing_time.hour == 23


def test_root(client):
    body = client.get("/").json()
    assert body["service"] == "Campus Booking Service"
    assert body["modules"]["bookings"]["prefix"] == "/api/bookings"


def test_response_headers(client):
    response = client.get("/")
    assert "X-Correlation-ID" in response.headers
    assert response.headers["X-Response-Time"].endswith("s")
