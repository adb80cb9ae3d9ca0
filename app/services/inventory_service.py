import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.inventory import InventoryCategory, InventoryItem
from app.models.purchase import Purchase
from app.schemas.inventory import CategoryCreate, InventoryItemWrite, PurchaseCreate
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


# ---------- Categories ----------

def create_category(payload: CategoryCreate, *, db: Session) -> InventoryCategory:
    with UnitOfWork(db, "create_category") as uow:
        row = InventoryCategory(name=payload.name.strip())
        db.add(row)
        try:
            uow.step()
        except IntegrityError as exc:
            raise ConflictError("Category already exists") from exc
    return row


def list_categories(*, db: Session) -> list[InventoryCategory]:
    return db.query(InventoryCategory).order_by(InventoryCategory.name.asc()).all()


# ---------- Items ----------

def get_item(item_id: str, *, db: Session) -> InventoryItem:
    row = (
        db.query(InventoryItem)
        .options(joinedload(InventoryItem.category))
        .filter(InventoryItem.id == str(item_id))
        .one_or_none()
    )
    if row is None:
        raise NotFoundError("Inventory item not found")
    return row


def _require_category(db: Session, category_id: Optional[str]) -> None:
    if category_id is not None and db.get(InventoryCategory, str(category_id)) is None:
        raise ValidationError("Unknown inventory category")


def _apply_item_fields(row: InventoryItem, payload: InventoryItemWrite) -> None:
    row.item_name = payload.item_name
    row.category_id = payload.category_id
    row.vehicle_compatibility = payload.vehicle_compatibility
    row.purchase_price = payload.purchase_price
    row.selling_price = payload.selling_price
    row.quantity_in_stock = max(0, int(payload.quantity_in_stock))
    row.min_stock_alert = payload.min_stock_alert


def create_item(payload: InventoryItemWrite, *, db: Session) -> InventoryItem:
    with UnitOfWork(db, "create_inventory_item"):
        _require_category(db, payload.category_id)
        row = InventoryItem()
        _apply_item_fields(row, payload)
        db.add(row)
    return get_item(row.id, db=db)


def update_item(item_id: str, payload: InventoryItemWrite, *, db: Session) -> InventoryItem:
    with UnitOfWork(db, "update_inventory_item"):
        row = get_item(item_id, db=db)
        _require_category(db, payload.category_id)
        _apply_item_fields(row, payload)
    db.refresh(row)
    return row


def delete_item(item_id: str, *, db: Session) -> None:
    with UnitOfWork(db, "delete_inventory_item"):
        row = get_item(item_id, db=db)
        db.delete(row)
    logger.info("Inventory item deleted", extra={"inventory_id": item_id})


def list_items(
    *,
    db: Session,
    category_id: Optional[str] = None,
    low_stock: bool = False,
) -> list[InventoryItem]:
    q = db.query(InventoryItem).options(joinedload(InventoryItem.category))

    if category_id is not None and category_id not in ("", "all"):
        q = q.filter(InventoryItem.category_id == str(category_id))
    if low_stock:
        q = q.filter(InventoryItem.quantity_in_stock <= InventoryItem.min_stock_alert)

    return q.order_by(InventoryItem.item_name.asc()).all()


# ---------- Stock movements ----------

def _stock_level(db: Session, item_id: str) -> Optional[int]:
    return db.execute(
        select(InventoryItem.quantity_in_stock).where(InventoryItem.id == str(item_id))
    ).scalar_one_or_none()


def add_stock(db: Session, item_id: str, quantity: int) -> None:
    """Single-statement increment; safe against concurrent writers."""
    db.execute(
        update(InventoryItem)
        .where(InventoryItem.id == str(item_id))
        .values(
            quantity_in_stock=InventoryItem.quantity_in_stock + int(quantity),
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session="fetch")
    )


def consume_for_billing(db: Session, item_id: str, quantity: int) -> Optional[int]:
    """
    Decrement stock for a billed line, floored at zero.

    Over-consumption is truncated rather than rejected: billing is never blocked
    by a stock mismatch. Returns the resulting stock level, or None when the
    item no longer exists (the line is still billed).
    """
    current = _stock_level(db, item_id)
    if current is None:
        logger.warning(
            "Billed line references missing inventory item",
            extra={"inventory_id": item_id, "quantity": quantity},
        )
        return None

    if int(quantity) > current:
        logger.warning(
            "Stock clamped at zero",
            extra={"inventory_id": item_id, "quantity": quantity, "quantity_in_stock": current},
        )

    db.execute(
        update(InventoryItem)
        .where(InventoryItem.id == str(item_id))
        .values(
            quantity_in_stock=case(
                (InventoryItem.quantity_in_stock < int(quantity), 0),
                else_=InventoryItem.quantity_in_stock - int(quantity),
            ),
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session="fetch")
    )
    return max(0, current - int(quantity))


# ---------- Purchases ----------

def record_purchase(payload: PurchaseCreate, *, db: Session) -> Purchase:
    if payload.quantity <= 0:
        raise ValidationError("Purchase quantity must be positive")

    with UnitOfWork(db, "record_purchase") as uow:
        item = get_item(payload.inventory_id, db=db)

        purchase = Purchase(
            inventory_id=item.id,
            quantity=int(payload.quantity),
            purchase_price=payload.purchase_price,
            supplier=payload.supplier,
            purchase_date=payload.purchase_date or date.today(),
            notes=payload.notes,
        )
        db.add(purchase)
        uow.step()

        add_stock(db, item.id, payload.quantity)

    logger.info(
        "Purchase recorded",
        extra={"purchase_id": purchase.id, "inventory_id": item.id, "quantity": purchase.quantity},
    )
    return purchase


def list_purchases(*, db: Session, inventory_id: Optional[str] = None) -> list[Purchase]:
    q = db.query(Purchase).options(joinedload(Purchase.inventory_item))

    if inventory_id is not None and inventory_id != "":
        q = q.filter(Purchase.inventory_id == str(inventory_id))

    return q.order_by(Purchase.purchase_date.desc(), Purchase.created_at.desc()).all()
