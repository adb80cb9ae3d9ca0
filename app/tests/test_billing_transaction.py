from decimal import Decimal

from fastapi.testclient import TestClient

from app.database import SessionLocal
from app.main import app
from app.models.billing import BillingItem, Expense
from app.models.inventory import InventoryItem
from app.schemas.billing import BillingItemIn, ExpenseIn
from app.services import billing_service

client = TestClient(app)


def _create_job_card(total: str = "1500", status: str = "finalized") -> dict:
    booking = client.post(
        "/bookings",
        json={
            "customer_name": "Arjun",
            "mobile": "9222222222",
            "vehicle_type": "Four Wheeler",
            "vehicle_brand": "Hyundai",
            "vehicle_model": "i20",
            "vehicle_number": "KA02CD5678",
            "service_type": "Repair",
            "preferred_date": "2026-10-23",
            "preferred_time": "09:00 AM",
        },
    )
    assert booking.status_code == 200, booking.text

    card = client.post(
        "/job-cards",
        json={
            "booking_id": booking.json()["booking"]["id"],
            "items": [{"category": "Engine", "problem_description": "Overheating", "estimated_price": total}],
            "total_estimated_amount": total,
            "status": status,
        },
    )
    assert card.status_code == 200, card.text
    return card.json()["job_card"]


def _create_item(stock: int) -> str:
    resp = client.post(
        "/inventory",
        json={"item_name": "Coolant", "selling_price": "200", "quantity_in_stock": stock},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["item"]["id"]


def _stock(item_id: str) -> int:
    db = SessionLocal()
    try:
        return db.get(InventoryItem, item_id).quantity_in_stock
    finally:
        db.close()


def test_compute_totals_excludes_expenses():
    totals = billing_service.compute_totals(
        Decimal("1500"),
        [BillingItemIn(item_name="Coolant", quantity=2, unit_price=Decimal("200"))],
        [ExpenseIn(expense_name="Outsourced welding", amount=Decimal("300"))],
        Decimal("200"),
    )
    assert totals.inventory_total == Decimal("400.00")
    assert totals.expenses_total == Decimal("300.00")
    assert totals.final_amount == Decimal("1700.00")


def test_line_total_prefers_supplied_total():
    assert billing_service.line_total(
        BillingItemIn(item_name="x", quantity=3, unit_price=Decimal("10"), total_price=Decimal("25"))
    ) == Decimal("25")
    assert billing_service.line_total(
        BillingItemIn(item_name="x", quantity=3, unit_price=Decimal("10"))
    ) == Decimal("30")


def test_create_billing_totals_stock_and_job_card_status():
    card = _create_job_card("1500")
    item_id = _create_item(stock=10)

    resp = client.post(
        "/billing",
        json={
            "job_card_id": card["id"],
            "job_card_total": "1500",
            "items": [{"inventory_id": item_id, "item_name": "Coolant", "quantity": 2, "unit_price": "200"}],
            "expenses": [{"expense_name": "Towing", "amount": "300"}],
            "discount": "200",
            "payment_method": "cash",
        },
    )
    assert resp.status_code == 200, resp.text
    billing = resp.json()["billing"]

    assert billing["bill_code"].startswith("BILL-")
    assert Decimal(billing["inventory_total"]) == Decimal("400")
    assert Decimal(billing["expenses_total"]) == Decimal("300")
    assert Decimal(billing["final_amount"]) == Decimal("1700")
    assert billing["payment_status"] == "pending"
    assert [i["item_name"] for i in billing["items"]] == ["Coolant"]
    assert [e["expense_name"] for e in billing["expenses"]] == ["Towing"]
    assert billing["job_card"]["status"] == "billed"

    assert _stock(item_id) == 8


def test_job_card_total_defaults_to_estimate():
    card = _create_job_card("750")

    resp = client.post("/billing", json={"job_card_id": card["id"]})
    assert resp.status_code == 200, resp.text
    assert Decimal(resp.json()["billing"]["final_amount"]) == Decimal("750")


def test_over_consumption_clamps_stock_and_still_bills():
    card = _create_job_card()
    item_id = _create_item(stock=4)

    resp = client.post(
        "/billing",
        json={
            "job_card_id": card["id"],
            "items": [{"inventory_id": item_id, "item_name": "Coolant", "quantity": 10, "unit_price": "10"}],
        },
    )
    assert resp.status_code == 200, resp.text
    assert _stock(item_id) == 0


def test_line_for_unknown_item_is_billed_without_reference():
    card = _create_job_card()

    resp = client.post(
        "/billing",
        json={
            "job_card_id": card["id"],
            "items": [{"inventory_id": "gone", "item_name": "Old part", "quantity": 1, "unit_price": "50"}],
        },
    )
    assert resp.status_code == 200, resp.text
    line = resp.json()["billing"]["items"][0]
    assert line["inventory_id"] is None
    assert Decimal(line["total_price"]) == Decimal("50")


def test_second_billing_for_job_card_is_409():
    card = _create_job_card()

    first = client.post("/billing", json={"job_card_id": card["id"]})
    assert first.status_code == 200

    second = client.post("/billing", json={"job_card_id": card["id"]})
    assert second.status_code == 409
    assert second.json() == {"success": False, "error": "Billing already exists for this job card"}


def test_billing_requires_existing_finalized_job_card():
    missing = client.post("/billing", json={"job_card_id": "no-such-card"})
    assert missing.status_code == 404

    draft = _create_job_card(status="draft")
    resp = client.post("/billing", json={"job_card_id": draft["id"]})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Job card must be finalized before billing"


def test_delete_billing_reopens_job_card_without_restoring_stock():
    card = _create_job_card()
    item_id = _create_item(stock=10)

    billing = client.post(
        "/billing",
        json={
            "job_card_id": card["id"],
            "items": [{"inventory_id": item_id, "item_name": "Coolant", "quantity": 3, "unit_price": "100"}],
            "expenses": [{"expense_name": "Fuel", "amount": "20"}],
        },
    ).json()["billing"]
    assert _stock(item_id) == 7

    deleted = client.delete(f"/billing/{billing['id']}")
    assert deleted.status_code == 200
    assert client.get(f"/billing/{billing['id']}").status_code == 404

    job_card = client.get(f"/job-cards/{card['id']}").json()["job_card"]
    assert job_card["status"] == "finalized"
    assert _stock(item_id) == 7

    db = SessionLocal()
    try:
        assert db.query(BillingItem).filter(BillingItem.billing_id == billing["id"]).count() == 0
        assert db.query(Expense).filter(Expense.billing_id == billing["id"]).count() == 0
    finally:
        db.close()

    rebilled = client.post("/billing", json={"job_card_id": card["id"]})
    assert rebilled.status_code == 200


def test_payment_status_moves_freely_and_filters_list():
    card = _create_job_card()
    billing = client.post("/billing", json={"job_card_id": card["id"]}).json()["billing"]

    paid = client.put(f"/billing/{billing['id']}", json={"payment_status": "paid", "payment_method": "upi"})
    assert paid.status_code == 200
    assert paid.json()["billing"]["payment_status"] == "paid"

    back = client.put(f"/billing/{billing['id']}", json={"payment_status": "partial"})
    assert back.json()["billing"]["payment_status"] == "partial"

    listed = client.get("/billing", params={"payment_status": "partial"}).json()["billings"]
    assert [b["id"] for b in listed] == [billing["id"]]
    assert client.get("/billing", params={"payment_status": "paid"}).json()["billings"] == []


def test_deleting_billed_job_card_removes_billing():
    card = _create_job_card()
    billing = client.post("/billing", json={"job_card_id": card["id"]}).json()["billing"]

    assert client.delete(f"/job-cards/{card['id']}").status_code == 200
    assert client.get(f"/billing/{billing['id']}").status_code == 404


def test_deleting_inventory_item_keeps_billed_line():
    card = _create_job_card()
    item_id = _create_item(stock=5)
    billing = client.post(
        "/billing",
        json={
            "job_card_id": card["id"],
            "items": [{"inventory_id": item_id, "item_name": "Coolant", "quantity": 1, "unit_price": "200"}],
        },
    ).json()["billing"]

    assert client.delete(f"/inventory/{item_id}").status_code == 200

    line = client.get(f"/billing/{billing['id']}").json()["billing"]["items"][0]
    assert line["item_name"] == "Coolant"
    assert line["inventory_id"] is None
