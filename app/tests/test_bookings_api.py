import re

from fastapi.testclient import TestClient

from app.main import app
from app.services.codes import generate_code

client = TestClient(app)


def _booking_payload(**overrides) -> dict:
    payload = {
        "customer_name": "Ravi Kumar",
        "mobile": "9876543210",
        "vehicle_type": "Two Wheeler",
        "vehicle_brand": "Honda",
        "vehicle_model": "Activa",
        "vehicle_number": "KA01AB1234",
        "service_type": "General Service",
        "preferred_date": "2026-10-20",
        "preferred_time": "10:00 AM",
    }
    payload.update(overrides)
    return payload


def _create_booking(**overrides) -> dict:
    resp = client.post("/bookings", json=_booking_payload(**overrides))
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    return body["booking"]


def test_generated_codes_have_prefix_stamp_and_suffix():
    code = generate_code("JC")
    assert re.fullmatch(r"JC-[0-9A-Z]+-[0-9A-Z]{4}", code)
    assert generate_code("BILL").startswith("BILL-")


def test_create_booking_is_pending_with_customer_code():
    booking = _create_booking()
    assert booking["status"] == "pending"
    assert booking["booking_code"].startswith("PA-")
    assert booking["preferred_date"] == "2026-10-20"


def test_create_booking_missing_field_is_400():
    payload = _booking_payload()
    del payload["mobile"]
    resp = client.post("/bookings", json=payload)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "mobile" in body["error"]


def test_list_bookings_filters_and_all_means_no_filter():
    _create_booking(vehicle_type="Two Wheeler", service_type="Oil Change")
    _create_booking(vehicle_type="Four Wheeler", preferred_date="2026-10-21")

    everything = client.get("/bookings", params={"status": "all", "vehicle_type": "all"})
    assert everything.status_code == 200
    assert len(everything.json()["bookings"]) == 2

    four = client.get("/bookings", params={"vehicle_type": "Four Wheeler"})
    assert [b["vehicle_type"] for b in four.json()["bookings"]] == ["Four Wheeler"]

    oil = client.get("/bookings", params={"service_type": "Oil Change"})
    assert len(oil.json()["bookings"]) == 1

    by_date = client.get("/bookings", params={"date": "2026-10-21"})
    assert [b["preferred_date"] for b in by_date.json()["bookings"]] == ["2026-10-21"]


def test_update_booking_status_and_reject_unknown_status():
    booking = _create_booking()

    ok = client.put(f"/bookings/{booking['id']}", json={"status": "confirmed"})
    assert ok.status_code == 200
    assert ok.json()["booking"]["status"] == "confirmed"

    bad = client.put(f"/bookings/{booking['id']}", json={"status": "cancelled"})
    assert bad.status_code == 400
    assert bad.json()["success"] is False


def test_get_and_delete_booking():
    booking = _create_booking()

    got = client.get(f"/bookings/{booking['id']}")
    assert got.status_code == 200
    assert got.json()["booking"]["id"] == booking["id"]

    deleted = client.delete(f"/bookings/{booking['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True, "message": "Booking deleted successfully"}

    missing = client.get(f"/bookings/{booking['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Booking not found"}


def test_deleting_booking_keeps_its_job_card():
    booking = _create_booking()
    card = client.post(
        "/job-cards",
        json={
            "booking_id": booking["id"],
            "categories": ["Engine"],
            "items": [{"category": "Engine", "problem_description": "Noise", "estimated_price": "100"}],
            "total_estimated_amount": "100",
        },
    )
    assert card.status_code == 200, card.text
    card_id = card.json()["job_card"]["id"]

    assert client.delete(f"/bookings/{booking['id']}").status_code == 200

    remaining = client.get(f"/job-cards/{card_id}")
    assert remaining.status_code == 200
    assert remaining.json()["job_card"]["booking_id"] is None


def test_booking_stats_counts_status_and_vehicle_type():
    first = _create_booking(vehicle_type="Two Wheeler")
    _create_booking(vehicle_type="Four Wheeler")
    _create_booking(vehicle_type="Four Wheeler")
    client.put(f"/bookings/{first['id']}", json={"status": "completed"})

    resp = client.get("/stats")
    assert resp.status_code == 200
    assert resp.json()["stats"] == {
        "total": 3,
        "pending": 2,
        "confirmed": 0,
        "completed": 1,
        "two_wheeler": 1,
        "four_wheeler": 2,
    }
