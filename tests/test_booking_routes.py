"""API tests for bookings, user booking listings and availability."""

from datetime import timedelta

from conftest import book

from campus_booking.shared.infrastructure.clock import campus_today


def user_id(client, headers) -> int:
    return client.get("/api/auth/me", headers=headers).json()["id"]


def test_create_booking(client, auth_headers, room_id, tomorrow):
    response = book(client, auth_headers, room_id, tomorrow, "10:00", "11:30")

    assert response.status_code == 201
    body = response.json()
    assert body["resource_id"] == room_id
    assert body["user_id"] == user_id(client, auth_headers)
    assert body["date"] == tomorrow.isoformat()
    assert body["start_time"] == "10:00:00"
    assert body["end_time"] == "11:30:00"
    assert body["status"] == "booked"


def test_overlapping_booking_is_rejected(client, auth_headers, other_headers, room_id, tomorrow):
    first = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").json()

    response = book(client, other_headers, room_id, tomorrow, "10:30", "11:30")

    assert response.status_code == 409
    body = response.json()
    assert body["detail"] == "This time slot conflicts with an existing booking"
    assert body["details"]["conflicting_booking_ids"] == [first["booking_id"]]


def test_back_to_back_and_other_resources_are_fine(client, auth_headers, room_id, tomorrow):
    other_room = client.post(
        "/api/resources/", json={"name": "Room C", "type": "Room", "capacity": 8}, headers=auth_headers
    ).json()["resource_id"]

    assert book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").status_code == 201
    assert book(client, auth_headers, room_id, tomorrow, "11:00", "12:00").status_code == 201
    assert book(client, auth_headers, other_room, tomorrow, "10:00", "11:00").status_code == 201
    assert book(client, auth_headers, room_id, tomorrow + timedelta(days=1), "10:00", "11:00").status_code == 201


def test_policy_violations(client, auth_headers, room_id, tomorrow):
    early = book(client, auth_headers, room_id, tomorrow, "06:00", "07:00")
    assert early.status_code == 400
    assert early.json()["detail"] == "Bookings must fall between 08:00 and 22:00"

    too_long = book(client, auth_headers, room_id, tomorrow, "08:00", "14:00")
    assert too_long.status_code == 400
    assert "at most 240 minutes" in too_long.json()["detail"]

    past = book(client, auth_headers, room_id, campus_today() - timedelta(days=1), "10:00", "11:00")
    assert past.status_code == 400
    assert past.json()["details"]["violations"] == ["Bookings cannot start in the past"]

    far = book(client, auth_headers, room_id, campus_today() + timedelta(days=120), "10:00", "11:00")
    assert far.status_code == 400


def test_inverted_slot_is_a_request_error(client, auth_headers, room_id, tomorrow):
    response = book(client, auth_headers, room_id, tomorrow, "11:00", "10:00")
    assert response.status_code == 422


def test_unknown_and_cancelled_resources(client, auth_headers, room_id, tomorrow):
    assert book(client, auth_headers, 999, tomorrow, "10:00", "11:00").status_code == 404

    client.put(f"/api/resources/{room_id}/cancel", headers=auth_headers)
    response = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00")

    assert response.status_code == 409
    assert response.json()["detail"] == "Resource is not available for booking"


def test_bookings_are_private(client, auth_headers, other_headers, room_id, tomorrow):
    booking = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").json()

    assert client.get(f"/api/bookings/{booking['booking_id']}/", headers=auth_headers).status_code == 200
    assert client.get(f"/api/bookings/{booking['booking_id']}/", headers=other_headers).status_code == 404
    assert client.put(f"/api/bookings/{booking['booking_id']}/cancel", headers=other_headers).status_code == 404
    assert client.get("/api/bookings/", headers=other_headers).json() == []


def test_list_my_bookings_with_status_filter(client, auth_headers, room_id, tomorrow):
    first = book(client, auth_headers, room_id, tomorrow, "14:00", "15:00").json()
    second = book(client, auth_headers, room_id, tomorrow, "09:00", "10:00").json()
    client.put(f"/api/bookings/{first['booking_id']}/cancel", headers=auth_headers)

    everything = client.get("/api/bookings/", headers=auth_headers).json()
    assert [b["booking_id"] for b in everything] == [second["booking_id"], first["booking_id"]]

    cancelled = client.get("/api/bookings/", params={"status": "cancelled"}, headers=auth_headers).json()
    assert [b["booking_id"] for b in cancelled] == [first["booking_id"]]


def test_cancel_frees_slot_and_is_final(client, auth_headers, other_headers, room_id, tomorrow):
    booking = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").json()

    cancelled = client.put(f"/api/bookings/{booking['booking_id']}/cancel", headers=auth_headers)
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = client.put(f"/api/bookings/{booking['booking_id']}/cancel", headers=auth_headers)
    assert again.status_code == 409
    assert client.put(f"/api/bookings/{booking['booking_id']}/complete", headers=auth_headers).status_code == 409

    assert book(client, other_headers, room_id, tomorrow, "10:00", "11:00").status_code == 201


def test_complete(client, auth_headers, room_id, tomorrow):
    booking = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").json()

    response = client.put(f"/api/bookings/{booking['booking_id']}/complete", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_reschedule(client, auth_headers, other_headers, room_id, tomorrow):
    mine = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").json()
    book(client, other_headers, room_id, tomorrow, "12:00", "13:00")
    url = f"/api/bookings/{mine['booking_id']}/reschedule"

    overlapping_itself = client.put(
        url, json={"date": tomorrow.isoformat(), "start_time": "10:30", "end_time": "11:30"}, headers=auth_headers
    )
    assert overlapping_itself.status_code == 200
    assert overlapping_itself.json()["start_time"] == "10:30:00"

    into_other = client.put(
        url, json={"date": tomorrow.isoformat(), "start_time": "11:30", "end_time": "12:30"}, headers=auth_headers
    )
    assert into_other.status_code == 409

    current = client.get(f"/api/bookings/{mine['booking_id']}/", headers=auth_headers).json()
    assert current["start_time"] == "10:30:00"


def test_user_bookings_join_resources(client, auth_headers, other_headers, room_id, tomorrow):
    book(client, auth_headers, room_id, tomorrow, "10:00", "11:00")
    me = user_id(client, auth_headers)

    response = client.get(f"/api/users/{me}/bookings/", headers=auth_headers)

    assert response.status_code == 200
    [row] = response.json()
    assert row["resource_name"] == "Seminar Room B12"
    assert row["resource_type"] == "Room"
    assert row["date"] == tomorrow.isoformat()
    assert row["status"] == "booked"

    assert client.get(f"/api/users/{me}/bookings/", headers=other_headers).status_code == 403


def test_availability(client, auth_headers, room_id, tomorrow):
    booking = book(client, auth_headers, room_id, tomorrow, "10:00", "11:00").json()
    book(client, auth_headers, room_id, tomorrow, "15:00", "16:30")

    response = client.get(
        f"/api/resources/{room_id}/availability/", params={"date": tomorrow.isoformat()}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["resource_status"] == "available"
    assert body["booked"][0] == {"booking_id": booking["booking_id"], "start_time": "10:00:00", "end_time": "11:00:00"}
    assert [(w["start_time"], w["end_time"]) for w in body["free"]] == [
        ("08:00:00", "10:00:00"),
        ("11:00:00", "15:00:00"),
        ("16:30:00", "22:00:00"),
    ]


def test_availability_requires_date(client, auth_headers, room_id):
    response = client.get(f"/api/resources/{room_id}/availability/", headers=auth_headers)
    assert response.status_code == 422
