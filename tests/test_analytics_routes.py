"""API tests for usage analytics."""

from datetime import timedelta

from conftest import book


def make_resource(client, headers, name) -> int:
    response = client.post("/api/resources/", json={"name": name, "type": "Room", "capacity": 10}, headers=headers)
    return response.json()["resource_id"]


def test_usage_counts_every_resource(client, auth_headers, tomorrow):
    busy = make_resource(client, auth_headers, "Busy Room")
    idle = make_resource(client, auth_headers, "Idle Room")

    first = book(client, auth_headers, busy, tomorrow, "10:00", "11:00").json()
    book(client, auth_headers, busy, tomorrow, "12:00", "13:00")
    client.put(f"/api/bookings/{first['booking_id']}/cancel", headers=auth_headers)

    response = client.get("/api/analytics/usage/", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == [
        {"resource_id": busy, "name": "Busy Room", "total_bookings": 2, "active_bookings": 1},
        {"resource_id": idle, "name": "Idle Room", "total_bookings": 0, "active_bookings": 0},
    ]


def test_top_rooms_orders_by_total_then_id(client, auth_headers, tomorrow):
    a = make_resource(client, auth_headers, "A")
    b = make_resource(client, auth_headers, "B")
    c = make_resource(client, auth_headers, "C")

    for day_offset in range(3):
        book(client, auth_headers, c, tomorrow + timedelta(days=day_offset), "10:00", "11:00")
    book(client, auth_headers, a, tomorrow, "10:00", "11:00")
    book(client, auth_headers, b, tomorrow, "10:00", "11:00")

    rows = client.get("/api/analytics/top-rooms/", headers=auth_headers).json()
    assert [(r["resource_id"], r["total_bookings"]) for r in rows] == [(c, 3), (a, 1), (b, 1)]

    top_one = client.get("/api/analytics/top-rooms/", params={"limit": 1}, headers=auth_headers).json()
    assert [r["resource_id"] for r in top_one] == [c]


def test_top_rooms_limit_bounds(client, auth_headers):
    for limit in (0, 101):
        response = client.get("/api/analytics/top-rooms/", params={"limit": limit}, headers=auth_headers)
        assert response.status_code == 422


def test_analytics_require_authentication(client):
    assert client.get("/api/analytics/usage/").status_code == 401
