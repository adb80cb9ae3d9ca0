import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Billing(Base):
    __tablename__ = "billing"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job_card_id = Column(
        String,
        ForeignKey("job_cards.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    bill_code = Column(String, nullable=False, unique=True)

    job_card_total = Column(Numeric(12, 2), nullable=False, default=0)
    inventory_total = Column(Numeric(12, 2), nullable=False, default=0)
    # Internal bookkeeping only; never part of final_amount.
    expenses_total = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    final_amount = Column(Numeric(12, 2), nullable=False, default=0)

    payment_status = Column(String, nullable=False, default="pending", index=True)
    payment_method = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    job_card = relationship("JobCard", back_populates="billing")
    items = relationship(
        "BillingItem",
        back_populates="billing",
        cascade="all, delete-orphan",
        order_by="BillingItem.position",
    )
    expenses = relationship(
        "Expense",
        back_populates="billing",
        cascade="all, delete-orphan",
        order_by="Expense.position",
    )

    __table_args__ = (
        CheckConstraint(
            "payment_status in ('pending','partial','paid')",
            name="ck_billing_payment_status_valid",
        ),
    )


class BillingItem(Base):
    __tablename__ = "billing_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    billing_id = Column(
        String,
        ForeignKey("billing.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    inventory_id = Column(
        String,
        ForeignKey("inventory.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False, default=0)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    billing = relationship("Billing", back_populates="items")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    billing_id = Column(
        String,
        ForeignKey("billing.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    expense_name = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    billing = relationship("Billing", back_populates="expenses")
