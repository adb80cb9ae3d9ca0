import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.billing import Billing, BillingItem, Expense
from app.models.inventory import InventoryItem
from app.models.job_card import JobCard
from app.schemas.billing import BillingCreate, BillingItemIn, ExpenseIn
from app.services import inventory_service, job_card_service
from app.services.codes import BILL_PREFIX, generate_code
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class BillingTotals:
    job_card_total: Decimal
    inventory_total: Decimal
    expenses_total: Decimal
    discount: Decimal
    final_amount: Decimal


def line_total(item: BillingItemIn) -> Decimal:
    if item.total_price is not None:
        return Decimal(item.total_price)
    return Decimal(item.quantity) * Decimal(item.unit_price)


def compute_totals(
    job_card_total: Decimal,
    items: list[BillingItemIn],
    expenses: list[ExpenseIn],
    discount: Decimal,
) -> BillingTotals:
    """
    final_amount = job card charges + parts - discount.

    Expenses are internal costs: they are totalled for bookkeeping but never
    reach the customer-facing amount.
    """
    inventory_total = sum((line_total(i) for i in items), Decimal("0"))
    expenses_total = sum((Decimal(e.amount) for e in expenses), Decimal("0"))
    job_card_total = Decimal(job_card_total)
    discount = Decimal(discount)

    return BillingTotals(
        job_card_total=job_card_total.quantize(_CENTS),
        inventory_total=inventory_total.quantize(_CENTS),
        expenses_total=expenses_total.quantize(_CENTS),
        discount=discount.quantize(_CENTS),
        final_amount=(job_card_total + inventory_total - discount).quantize(_CENTS),
    )


def restore_stock_on_billing_delete() -> bool:
    # Deleting a bill leaves consumed parts consumed. Returning True hands the
    # billed quantities back to stock on delete.
    return False


def _known_inventory_ids(db: Session, items: list[BillingItemIn]) -> set[str]:
    ids = {str(i.inventory_id) for i in items if i.inventory_id}
    if not ids:
        return set()
    return {row_id for (row_id,) in db.query(InventoryItem.id).filter(InventoryItem.id.in_(ids))}


def _query(db: Session):
    return db.query(Billing).options(
        selectinload(Billing.items),
        selectinload(Billing.expenses),
        joinedload(Billing.job_card).joinedload(JobCard.booking),
        joinedload(Billing.job_card).selectinload(JobCard.items),
    )


def get_billing(billing_id: str, *, db: Session) -> Billing:
    row = _query(db).filter(Billing.id == str(billing_id)).one_or_none()
    if row is None:
        raise NotFoundError("Billing not found")
    return row


def list_billings(
    *,
    db: Session,
    job_card_id: Optional[str] = None,
    payment_status: Optional[str] = None,
) -> list[Billing]:
    q = _query(db)

    if job_card_id is not None and job_card_id != "":
        q = q.filter(Billing.job_card_id == str(job_card_id))
    if payment_status is not None and payment_status not in ("", "all"):
        q = q.filter(Billing.payment_status == str(payment_status))

    return q.order_by(Billing.created_at.desc()).all()


def create_billing(payload: BillingCreate, *, db: Session) -> Billing:
    """
    Stages, in order:
      1. reject a missing job card, an existing billing, or an unfinalized card
      2. compute totals
      3. persist billing, then its items, then its expenses
      4. consume stock for every line tied to an inventory item
      5. flip the job card to billed

    With atomic writes disabled each stage commits on its own and a failure
    leaves the earlier stages in place (no compensation).
    """
    with UnitOfWork(db, "create_billing") as uow:
        job_card = db.get(JobCard, str(payload.job_card_id))
        if job_card is None:
            raise NotFoundError("Job card not found")

        existing = db.query(Billing.id).filter(Billing.job_card_id == job_card.id).first()
        if existing is not None:
            raise ConflictError("Billing already exists for this job card")

        if job_card.status != "finalized":
            raise ValidationError("Job card must be finalized before billing")

        job_card_total = payload.job_card_total
        if job_card_total is None:
            job_card_total = job_card.total_estimated_amount

        totals = compute_totals(job_card_total, payload.items, payload.expenses, payload.discount)

        billing = Billing(
            job_card_id=job_card.id,
            bill_code=generate_code(BILL_PREFIX),
            job_card_total=totals.job_card_total,
            inventory_total=totals.inventory_total,
            expenses_total=totals.expenses_total,
            discount=totals.discount,
            final_amount=totals.final_amount,
            payment_status=payload.payment_status,
            payment_method=payload.payment_method,
            notes=payload.notes,
        )
        db.add(billing)
        try:
            uow.step()
        except IntegrityError as exc:
            # Lost a race against a concurrent billing for the same job card.
            raise ConflictError("Billing already exists for this job card") from exc

        # Lines pointing at a deleted item are still billed, without the reference.
        known_ids = _known_inventory_ids(db, payload.items)
        for position, item in enumerate(payload.items):
            billing.items.append(
                BillingItem(
                    position=position,
                    inventory_id=item.inventory_id if item.inventory_id in known_ids else None,
                    item_name=item.item_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=line_total(item).quantize(_CENTS),
                )
            )
        uow.step()

        for position, expense in enumerate(payload.expenses):
            billing.expenses.append(
                Expense(
                    position=position,
                    expense_name=expense.expense_name,
                    amount=expense.amount,
                    notes=expense.notes,
                )
            )
        uow.step()

        for item in payload.items:
            if item.inventory_id:
                inventory_service.consume_for_billing(db, item.inventory_id, item.quantity)
        uow.step()

        job_card_service.mark_billed(job_card)

    logger.info(
        "Billing created",
        extra={
            "billing_id": billing.id,
            "job_card_id": job_card.id,
            "final_amount": str(billing.final_amount),
        },
    )
    return billing


def update_billing_status(
    billing_id: str,
    payment_status: str,
    payment_method: Optional[str],
    *,
    db: Session,
) -> Billing:
    # Any payment status may move to any other; "paid" is not terminal.
    with UnitOfWork(db, "update_billing_status"):
        billing = get_billing(billing_id, db=db)
        billing.payment_status = payment_status
        billing.payment_method = payment_method
    return billing


def delete_billing(billing_id: str, *, db: Session) -> None:
    """
    Removes the billing with its items and expenses and reopens the job card
    as finalized so it can be billed again.
    """
    with UnitOfWork(db, "delete_billing") as uow:
        billing = get_billing(billing_id, db=db)
        job_card = billing.job_card

        if restore_stock_on_billing_delete():
            for item in billing.items:
                if item.inventory_id:
                    inventory_service.add_stock(db, item.inventory_id, item.quantity)

        db.delete(billing)
        uow.step()

        if job_card is not None:
            db.expire(job_card, ["billing"])
            job_card_service.reopen_after_billing_delete(job_card)

    logger.info(
        "Billing deleted",
        extra={
            "billing_id": billing_id,
            "job_card_id": None if job_card is None else job_card.id,
            "stock_restored": restore_stock_on_billing_delete(),
        },
    )
