"""HTTP API: routes, booking window, error bodies."""

from datetime import datetime, timedelta, timezone

import pytest

from . import factories


def future(days: int = 2) -> str:
    return (datetime.now(timezone.utc).date() + timedelta(days=days)).isoformat()


def booking_payload(**overrides) -> dict:
    data = {
        "date": future(),
        "start_time": "18:00",
        "customer_name": "Maria Rossi",
        "customer_phone": "+390000001",
        "party_size": 4,
    }
    data.update(overrides)
    return data


@pytest.fixture
def table(db_session, restaurant):
    return factories.add_table(db_session, restaurant, "T4", 4, zone="main")


@pytest.fixture
def booking(client, restaurant, table):
    response = client.post(f"/api/v1/{restaurant.id}/bookings", json=booking_payload())
    assert response.status_code == 201
    return response.json()["booking"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestAvailability:
    def test_slots(self, client, restaurant, table):
        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(), "party_size": 2},
        )

        assert response.status_code == 200
        slots = response.json()["slots"]
        assert slots[0] == {
            "start_time": "09:00",
            "end_time": "10:30",
            "resources": [{"type": "table", "id": table.id, "name": "T4"}],
        }
        assert slots[-1]["start_time"] == "21:30"

    def test_time_range(self, client, restaurant, table):
        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(), "party_size": 2, "time_start": "18:00", "time_end": "20:00"},
        )

        assert [s["start_time"] for s in response.json()["slots"]] == ["18:00", "18:30"]

    def test_half_time_range(self, client, restaurant, table):
        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(), "party_size": 2, "time_start": "18:00"},
        )

        assert response.status_code == 400

    def test_spa_slots(self, client, spa, massage):
        response = client.get(
            f"/api/v1/{spa.id}/availability",
            params={"date": future(), "service_id": massage.id},
        )

        assert response.status_code == 200
        assert response.json()["slots"][0]["resources"][0]["type"] == "staff"

    def test_missing_discriminator(self, client, restaurant):
        response = client.get(f"/api/v1/{restaurant.id}/availability", params={"date": future()})

        assert response.status_code == 400
        assert "party_size" in response.json()["error"]

    def test_missing_date(self, client, restaurant):
        response = client.get(f"/api/v1/{restaurant.id}/availability", params={"party_size": 2})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert body["details"]

    def test_past_date(self, client, restaurant):
        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(-1), "party_size": 2},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Date cannot be in the past"}

    def test_beyond_horizon(self, client, restaurant):
        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(31), "party_size": 2},
        )

        assert response.status_code == 400

    def test_same_day_disabled(self, client, db_session, restaurant):
        restaurant.allow_same_day = False
        db_session.commit()

        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(0), "party_size": 2},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Same-day bookings are not allowed"}

    def test_party_too_large(self, client, db_session, restaurant, table):
        factories.add_table(db_session, restaurant, "T10", 10, zone="terrace")

        response = client.get(
            f"/api/v1/{restaurant.id}/availability",
            params={"date": future(), "party_size": 10},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Party size cannot exceed 8"}

    def test_unknown_business(self, client):
        response = client.get("/api/v1/999/availability", params={"date": future(), "party_size": 2})

        assert response.status_code == 404
        assert response.json() == {"error": "Business 999 not found"}

    def test_unknown_service(self, client, spa):
        response = client.get(
            f"/api/v1/{spa.id}/availability",
            params={"date": future(), "service_id": 999},
        )

        assert response.status_code == 404


class TestBookings:
    def test_create(self, client, notifier, restaurant, table):
        response = client.post(f"/api/v1/{restaurant.id}/bookings", json=booking_payload())

        assert response.status_code == 201
        booking = response.json()["booking"]
        assert booking["status"] == "confirmed"
        assert booking["reference"].startswith("BK-")
        assert booking["end_time"] == "19:30"
        assert booking["assignments"] == [
            {"id": booking["assignments"][0]["id"], "resource_type": "table", "resource_id": table.id}
        ]
        assert notifier.sent[0][0] == "booking_created"

    def test_slot_taken(self, client, restaurant, booking):
        response = client.post(f"/api/v1/{restaurant.id}/bookings", json=booking_payload())

        assert response.status_code == 400
        assert response.json() == {"error": "Selected time slot is no longer available"}

    def test_party_too_large(self, client, restaurant, table):
        response = client.post(f"/api/v1/{restaurant.id}/bookings", json=booking_payload(party_size=9))

        assert response.status_code == 400
        assert response.json() == {"error": "Party size cannot exceed 8"}

    def test_bad_time_format(self, client, restaurant, table):
        response = client.post(f"/api/v1/{restaurant.id}/bookings", json=booking_payload(start_time="6pm"))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_past_date(self, client, restaurant, table):
        response = client.post(f"/api/v1/{restaurant.id}/bookings", json=booking_payload(date=future(-1)))

        assert response.status_code == 400

    def test_get(self, client, restaurant, booking):
        response = client.get(f"/api/v1/{restaurant.id}/bookings/{booking['id']}")

        assert response.status_code == 200
        assert response.json()["booking"] == booking

    def test_get_from_other_business(self, client, spa, booking):
        response = client.get(f"/api/v1/{spa.id}/bookings/{booking['id']}")

        assert response.status_code == 404
        assert response.json() == {"error": "Booking not found"}

    def test_by_phone(self, client, restaurant, booking):
        response = client.get(f"/api/v1/{restaurant.id}/bookings", params={"phone": "+390000001"})

        assert [b["id"] for b in response.json()["bookings"]] == [booking["id"]]

    def test_by_reference(self, client, restaurant, spa, booking):
        reference = booking["reference"]

        found = client.get(f"/api/v1/{restaurant.id}/bookings", params={"reference": reference.lower()})
        other = client.get(f"/api/v1/{spa.id}/bookings", params={"reference": reference})

        assert [b["id"] for b in found.json()["bookings"]] == [booking["id"]]
        assert other.json() == {"bookings": []}

    def test_lookup_needs_phone_or_reference(self, client, restaurant):
        response = client.get(f"/api/v1/{restaurant.id}/bookings")

        assert response.status_code == 400
        assert response.json() == {"error": "phone or reference is required"}

    def test_modify(self, client, restaurant, booking):
        response = client.patch(
            f"/api/v1/{restaurant.id}/bookings/{booking['id']}",
            json={"start_time": "20:00", "notes": "Birthday"},
        )

        assert response.status_code == 200
        updated = response.json()["booking"]
        assert (updated["start_time"], updated["end_time"], updated["notes"]) == ("20:00", "21:30", "Birthday")

    def test_modify_party_too_large(self, client, db_session, restaurant, booking):
        factories.add_table(db_session, restaurant, "T10", 10, zone="terrace")
        url = f"/api/v1/{restaurant.id}/bookings/{booking['id']}"

        response = client.patch(url, json={"party_size": 10})

        assert response.status_code == 400
        assert response.json() == {"error": "Party size cannot exceed 8"}
        assert client.get(url).json()["booking"]["party_size"] == 4

    def test_modify_inside_same_day_cutoff(self, client, db_session, restaurant, booking):
        restaurant.same_day_cutoff_minutes = 24 * 60
        db_session.commit()

        response = client.patch(
            f"/api/v1/{restaurant.id}/bookings/{booking['id']}",
            json={"date": future(0)},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Selected time is too close to now"}

    def test_cancel_twice(self, client, restaurant, booking):
        url = f"/api/v1/{restaurant.id}/bookings/{booking['id']}/cancel"

        assert client.post(url).json()["booking"]["status"] == "cancelled"

        response = client.post(url)
        assert response.status_code == 400
        assert response.json() == {"error": "Booking is already cancelled or marked as no-show"}

    def test_no_show(self, client, restaurant, booking):
        response = client.post(f"/api/v1/{restaurant.id}/bookings/{booking['id']}/no-show")

        assert response.json()["booking"]["status"] == "no_show"

    def test_reassign_defaults_to_table(self, client, db_session, restaurant, booking):
        other = factories.add_table(db_session, restaurant, "T6", 6)

        response = client.post(
            f"/api/v1/{restaurant.id}/bookings/{booking['id']}/reassign",
            json={"resource_id": other.id},
        )

        assert response.status_code == 200
        assert response.json()["booking"]["assignments"][0]["resource_id"] == other.id

    def test_reassign_wrong_type(self, client, restaurant, booking):
        response = client.post(
            f"/api/v1/{restaurant.id}/bookings/{booking['id']}/reassign",
            json={"resource_type": "room", "resource_id": 1},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No assignment found for this resource type"}


class TestManager:
    def test_list_bookings(self, client, restaurant, booking):
        client.post(f"/api/v1/{restaurant.id}/bookings/{booking['id']}/cancel")

        url = f"/api/v1/manager/{restaurant.id}/bookings"
        assert len(client.get(url).json()["bookings"]) == 1
        assert client.get(url, params={"status": "confirmed"}).json()["bookings"] == []
        assert client.get(url, params={"status": "bogus"}).status_code == 400

    def test_blocks(self, client, restaurant, table):
        url = f"/api/v1/manager/{restaurant.id}/blocks"
        day = future()

        response = client.post(url, json={"date": day, "start_time": "09:00", "end_time": "20:00", "reason": "Private event"})
        assert response.status_code == 201
        block = response.json()["block"]
        assert block["resource_id"] is None

        slots = client.get(
            f"/api/v1/{restaurant.id}/availability", params={"date": day, "party_size": 2}
        ).json()["slots"]
        assert [s["start_time"] for s in slots] == ["20:00", "20:30", "21:00", "21:30"]

        assert [b["id"] for b in client.get(url, params={"date": day}).json()["blocks"]] == [block["id"]]
        assert client.delete(f"{url}/{block['id']}").status_code == 204
        assert client.delete(f"{url}/{block['id']}").status_code == 404

    def test_invalid_block(self, client, restaurant):
        url = f"/api/v1/manager/{restaurant.id}/blocks"

        backwards = {"date": future(), "start_time": "12:00", "end_time": "11:00"}
        untyped = {"date": future(), "start_time": "11:00", "end_time": "12:00", "resource_id": 1}

        assert client.post(url, json=backwards).status_code == 400
        assert client.post(url, json=untyped).status_code == 400

    def test_hours(self, client, restaurant):
        url = f"/api/v1/manager/{restaurant.id}/hours"
        assert len(client.get(url).json()["hours"]) == 7

        response = client.put(url, json={"hours": [
            {"day_of_week": 0, "open_time": "00:00", "close_time": "00:00", "is_closed": True},
            {"day_of_week": 1, "open_time": "12:00", "close_time": "22:00"},
        ]})

        assert response.status_code == 200
        assert [h["day_of_week"] for h in response.json()["hours"]] == [0, 1]

    def test_hours_duplicate_day(self, client, restaurant):
        response = client.put(f"/api/v1/manager/{restaurant.id}/hours", json={"hours": [
            {"day_of_week": 1, "open_time": "12:00", "close_time": "22:00"},
            {"day_of_week": 1, "open_time": "09:00", "close_time": "11:00"},
        ]})

        assert response.status_code == 400

    def test_unknown_business(self, client):
        assert client.get("/api/v1/manager/999/hours").status_code == 404


class TestCatalog:
    def test_tables(self, client, restaurant, table):
        response = client.get(f"/api/v1/{restaurant.id}/resources")

        assert response.json() == {
            "type": "table",
            "resources": [{"id": table.id, "name": "T4", "is_active": True, "capacity": 4, "zone": "main"}],
        }

    def test_spa_defaults_to_staff(self, client, spa):
        body = client.get(f"/api/v1/{spa.id}/resources").json()

        assert body["type"] == "staff"
        assert [r["name"] for r in body["resources"]] == ["Anna"]
        assert body["resources"][0]["capacity"] is None

    def test_rooms(self, client, db_session, spa):
        factories.add_room(db_session, spa, "Suite")

        body = client.get(f"/api/v1/{spa.id}/resources", params={"type": "room"}).json()

        assert [r["name"] for r in body["resources"]] == ["Suite"]

    def test_restaurant_catalog(self, client, restaurant, table):
        body = client.get(f"/api/v1/{restaurant.id}/catalog").json()

        assert body["business"] == {
            "id": restaurant.id,
            "name": "Trattoria",
            "type": "restaurant",
            "timezone": "UTC",
            "max_booking_horizon_days": 30,
            "allow_same_day": True,
            "notes_enabled": True,
        }
        assert [h["day_of_week"] for h in body["hours"]] == list(range(7))
        assert body["hours"][0] == {"day_of_week": 0, "open_time": "09:00", "close_time": "23:00", "is_closed": False}
        assert body["tables"] == [{"id": table.id, "name": "T4", "capacity": 4, "zone": "main"}]
        assert body["restaurant_config"] == {"seating_duration_minutes": 90, "max_party_size": 8}
        assert body["services"] is None
        assert body["staff"] is None

    def test_spa_catalog(self, client, db_session, spa, massage):
        factories.add_service(db_session, spa, "Retired facial", duration=45, is_active=False)

        body = client.get(f"/api/v1/{spa.id}/catalog").json()

        assert body["business"]["type"] == "spa"
        assert body["services"] == [{"id": massage.id, "name": "Massage", "duration_minutes": 60}]
        assert [s["name"] for s in body["staff"]] == ["Anna"]
        assert body["tables"] is None
        assert body["restaurant_config"] is None

    def test_catalog_unknown_business(self, client):
        response = client.get("/api/v1/999/catalog")

        assert response.status_code == 404
        assert response.json() == {"error": "Business not found"}
