from decimal import Decimal

from fastapi.testclient import TestClient

from app.database import SessionLocal
from app.main import app
from app.models.inventory import InventoryItem
from app.models.purchase import Purchase
from app.services import inventory_service

client = TestClient(app)


def _create_item(**overrides) -> dict:
    payload = {
        "item_name": "Brake Pad",
        "purchase_price": "150",
        "selling_price": "200",
        "quantity_in_stock": 10,
        "min_stock_alert": 5,
    }
    payload.update(overrides)
    resp = client.post("/inventory", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()["item"]


def _stock(item_id: str) -> int:
    db = SessionLocal()
    try:
        return db.get(InventoryItem, item_id).quantity_in_stock
    finally:
        db.close()


def test_item_defaults_and_low_stock_flag():
    resp = client.post("/inventory", json={"item_name": "Spark Plug"})
    assert resp.status_code == 200, resp.text
    item = resp.json()["item"]

    assert item["vehicle_compatibility"] == "Both"
    assert item["quantity_in_stock"] == 0
    assert item["min_stock_alert"] == 5
    assert item["is_low_stock"] is True


def test_negative_stock_on_write_is_clamped_to_zero():
    item = _create_item(quantity_in_stock=-4)
    assert item["quantity_in_stock"] == 0

    updated = client.put(
        f"/inventory/{item['id']}",
        json={"item_name": "Brake Pad", "quantity_in_stock": -1},
    )
    assert updated.status_code == 200
    assert updated.json()["item"]["quantity_in_stock"] == 0


def test_purchase_increments_stock_by_quantity():
    item = _create_item(quantity_in_stock=7)

    resp = client.post(
        "/purchases",
        json={"inventory_id": item["id"], "quantity": 5, "purchase_price": "140", "supplier": "Bosch"},
    )
    assert resp.status_code == 200, resp.text
    purchase = resp.json()["purchase"]
    assert purchase["quantity"] == 5
    assert purchase["inventory_item"]["item_name"] == "Brake Pad"

    assert _stock(item["id"]) == 12


def test_purchase_rejects_non_positive_quantity_and_unknown_item():
    item = _create_item()

    zero = client.post("/purchases", json={"inventory_id": item["id"], "quantity": 0, "purchase_price": "1"})
    assert zero.status_code == 400

    missing = client.post("/purchases", json={"inventory_id": "nope", "quantity": 1, "purchase_price": "1"})
    assert missing.status_code == 404
    assert missing.json()["error"] == "Inventory item not found"

    assert _stock(item["id"]) == 10


def test_consume_for_billing_truncates_at_zero():
    item = _create_item(quantity_in_stock=4)

    db = SessionLocal()
    try:
        remaining = inventory_service.consume_for_billing(db, item["id"], 10)
        db.commit()
    finally:
        db.close()

    assert remaining == 0
    assert _stock(item["id"]) == 0


def test_consume_for_billing_skips_missing_item():
    db = SessionLocal()
    try:
        assert inventory_service.consume_for_billing(db, "no-such-item", 3) is None
    finally:
        db.close()


def test_list_filters_by_category_and_low_stock():
    category = client.post("/inventory/categories", json={"name": "Brakes"})
    assert category.status_code == 200, category.text
    category_id = category.json()["category"]["id"]

    duplicate = client.post("/inventory/categories", json={"name": "Brakes"})
    assert duplicate.status_code == 409

    _create_item(item_name="Disc", category_id=category_id, quantity_in_stock=2)
    _create_item(item_name="Oil Filter", quantity_in_stock=50)

    in_category = client.get("/inventory", params={"category_id": category_id}).json()["inventory"]
    assert [i["item_name"] for i in in_category] == ["Disc"]
    assert in_category[0]["category"]["name"] == "Brakes"

    low = client.get("/inventory", params={"low_stock": "true"}).json()["inventory"]
    assert [i["item_name"] for i in low] == ["Disc"]

    names = [c["name"] for c in client.get("/inventory/categories").json()["categories"]]
    assert names == ["Brakes"]


def test_unknown_category_is_rejected():
    resp = client.post("/inventory", json={"item_name": "Chain", "category_id": "missing"})
    assert resp.status_code == 400


def test_delete_item_removes_its_purchases():
    item = _create_item()
    client.post("/purchases", json={"inventory_id": item["id"], "quantity": 2, "purchase_price": "100"})

    listed = client.get("/purchases", params={"inventory_id": item["id"]}).json()["purchases"]
    assert len(listed) == 1
    assert Decimal(listed[0]["purchase_price"]) == Decimal("100")

    assert client.delete(f"/inventory/{item['id']}").status_code == 200
    assert client.get(f"/inventory/{item['id']}").status_code == 404

    db = SessionLocal()
    try:
        assert db.query(Purchase).filter(Purchase.inventory_id == item["id"]).count() == 0
    finally:
        db.close()
