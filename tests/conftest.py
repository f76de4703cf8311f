"""
Shared pytest fixtures.

Environment variables are set before any campus_booking import so the
settings singleton picks them up.
"""

import os

os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "campus-booking-test-secret-0123456789"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["BOOKING_COMPLETION_INTERVAL"] = "0"
os.environ["CAMPUS_TIMEZONE"] = "UTC"

from datetime import date, datetime, timedelta  # noqa: E402
from typing import Dict  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from campus_booking.config import settings  # noqa: E402
from campus_booking.main import app  # noqa: E402
from campus_booking.shared.infrastructure.clock import campus_today  # noqa: E402

# Monday 2 March 2026, 09:00 campus time
FIXED_NOW = datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def tomorrow() -> date:
    """A date the default booking policy accepts."""
    return campus_today() + timedelta(days=1)


@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient over a fresh SQLite file with the default booking policy."""
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'booking.db'}")
    monkeypatch.setattr(settings, "booking_policy_path", tmp_path / "booking_policy.yaml")

    with TestClient(app) as test_client:
        yield test_client


def signup(client: TestClient, email: str, name: str = "Test User", password: str = "secret123") -> Dict[str, str]:
    """Register a user and return bearer auth headers."""
    response = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['jwt_token']}"}


@pytest.fixture
def auth_headers(client) -> Dict[str, str]:
    return signup(client, "ada@campus.edu", name="Ada")


@pytest.fixture
def other_headers(client) -> Dict[str, str]:
    return signup(client, "grace@campus.edu", name="Grace")


@pytest.fixture
def room_id(client, auth_headers) -> int:
    response = client.post(
        "/api/resources/",
        json={"name": "Seminar Room B12", "type": "Room", "capacity": 30},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["resource_id"]


def book(client: TestClient, headers, resource_id: int, day: date, start: str, end: str):
    return client.post(
        "/api/bookings/",
        json={
            "resource_id": resource_id,
            "date": day.isoformat(),
            "start_time": start,
            "end_time": end,
        },
        headers=headers,
    )
