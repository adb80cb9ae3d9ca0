"""initial garage schema

Revision ID: 3c9d1e7a52b4
Revises:
Create Date: 2026-10-12 10:14:02.118734

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c9d1e7a52b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_NOW = sa.text("CURRENT_TIMESTAMP")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("booking_code", sa.String(), nullable=False),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("mobile", sa.String(), nullable=False),
        sa.Column("vehicle_type", sa.String(), nullable=False),
        sa.Column("vehicle_brand", sa.String(), nullable=False),
        sa.Column("vehicle_model", sa.String(), nullable=False),
        sa.Column("vehicle_number", sa.String(), nullable=False),
        sa.Column("service_type", sa.String(), nullable=False),
        sa.Column("other_description", sa.Text(), nullable=True),
        sa.Column("preferred_date", sa.Date(), nullable=False),
        sa.Column("preferred_time", sa.String(), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("booking_code", name="uq_bookings_booking_code"),
        sa.CheckConstraint(
            "status in ('pending','confirmed','completed')",
            name="ck_bookings_status_valid",
        ),
    )
    op.create_index("ix_bookings_vehicle_type", "bookings", ["vehicle_type"], unique=False)
    op.create_index("ix_bookings_service_type", "bookings", ["service_type"], unique=False)
    op.create_index("ix_bookings_preferred_date", "bookings", ["preferred_date"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)

    op.create_table(
        "job_cards",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "booking_id",
            sa.String(),
            sa.ForeignKey("bookings.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("job_card_code", sa.String(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("total_estimated_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(), nullable=False, server_default="finalized"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        # At most one job card per booking.
        sa.UniqueConstraint("booking_id", name="uq_job_cards_booking_id"),
        sa.UniqueConstraint("job_card_code", name="uq_job_cards_job_card_code"),
        sa.CheckConstraint(
            "status in ('draft','finalized','billed')",
            name="ck_job_cards_status_valid",
        ),
    )
    op.create_index("ix_job_cards_status", "job_cards", ["status"], unique=False)

    op.create_table(
        "job_card_items",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "job_card_id",
            sa.String(),
            sa.ForeignKey("job_cards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("problem_description", sa.Text(), nullable=False),
        sa.Column("estimated_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
    )
    op.create_index("ix_job_card_items_job_card_id", "job_card_items", ["job_card_id"], unique=False)

    op.create_table(
        "inventory_categories",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.UniqueConstraint("name", name="uq_inventory_categories_name"),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.Column(
            "category_id",
            sa.String(),
            sa.ForeignKey("inventory_categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("vehicle_compatibility", sa.String(), nullable=False, server_default="Both"),
        sa.Column("purchase_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("selling_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("quantity_in_stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_stock_alert", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("quantity_in_stock >= 0", name="ck_inventory_quantity_nonnegative"),
    )
    op.create_index("ix_inventory_item_name", "inventory", ["item_name"], unique=False)
    op.create_index("ix_inventory_category_id", "inventory", ["category_id"], unique=False)

    op.create_table(
        "purchases",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "inventory_id",
            sa.String(),
            sa.ForeignKey("inventory.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("purchase_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("supplier", sa.String(), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
    )
    op.create_index("ix_purchases_inventory_id", "purchases", ["inventory_id"], unique=False)
    op.create_index("ix_purchases_purchase_date", "purchases", ["purchase_date"], unique=False)

    op.create_table(
        "billing",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "job_card_id",
            sa.String(),
            sa.ForeignKey("job_cards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("bill_code", sa.String(), nullable=False),
        sa.Column("job_card_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("inventory_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("expenses_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("final_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        # At most one billing per job card; closes the check-then-insert race.
        sa.UniqueConstraint("job_card_id", name="uq_billing_job_card_id"),
        sa.UniqueConstraint("bill_code", name="uq_billing_bill_code"),
        sa.CheckConstraint(
            "payment_status in ('pending','partial','paid')",
            name="ck_billing_payment_status_valid",
        ),
    )
    op.create_index("ix_billing_payment_status", "billing", ["payment_status"], unique=False)

    op.create_table(
        "billing_items",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "billing_id",
            sa.String(),
            sa.ForeignKey("billing.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "inventory_id",
            sa.String(),
            sa.ForeignKey("inventory.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
    )
    op.create_index("ix_billing_items_billing_id", "billing_items", ["billing_id"], unique=False)
    op.create_index("ix_billing_items_inventory_id", "billing_items", ["inventory_id"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "billing_id",
            sa.String(),
            sa.ForeignKey("billing.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("expense_name", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
    )
    op.create_index("ix_expenses_billing_id", "expenses", ["billing_id"], unique=False)

    op.create_table(
        "staff",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("mobile", sa.String(), nullable=True),
        sa.Column("monthly_salary", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("joining_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("status in ('active','inactive')", name="ck_staff_status_valid"),
    )
    op.create_index("ix_staff_name", "staff", ["name"], unique=False)
    op.create_index("ix_staff_status", "staff", ["status"], unique=False)

    op.create_table(
        "attendance",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "staff_id",
            sa.String(),
            sa.ForeignKey("staff.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        # One mark per staff member per day; marking again upserts.
        sa.UniqueConstraint("staff_id", "date", name="uq_attendance_staff_date"),
        sa.CheckConstraint(
            "status in ('present','absent','half_day')",
            name="ck_attendance_status_valid",
        ),
    )
    op.create_index("ix_attendance_staff_id", "attendance", ["staff_id"], unique=False)
    op.create_index("ix_attendance_date", "attendance", ["date"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_attendance_date", table_name="attendance")
    op.drop_index("ix_attendance_staff_id", table_name="attendance")
    op.drop_table("attendance")

    op.drop_index("ix_staff_status", table_name="staff")
    op.drop_index("ix_staff_name", table_name="staff")
    op.drop_table("staff")

    op.drop_index("ix_expenses_billing_id", table_name="expenses")
    op.drop_table("expenses")

    op.drop_index("ix_billing_items_inventory_id", table_name="billing_items")
    op.drop_index("ix_billing_items_billing_id", table_name="billing_items")
    op.drop_table("billing_items")

    op.drop_index("ix_billing_payment_status", table_name="billing")
    op.drop_table("billing")

    op.drop_index("ix_purchases_purchase_date", table_name="purchases")
    op.drop_index("ix_purchases_inventory_id", table_name="purchases")
    op.drop_table("purchases")

    op.drop_index("ix_inventory_category_id", table_name="inventory")
    op.drop_index("ix_inventory_item_name", table_name="inventory")
    op.drop_table("inventory")

    op.drop_table("inventory_categories")

    op.drop_index("ix_job_card_items_job_card_id", table_name="job_card_items")
    op.drop_table("job_card_items")

    op.drop_index("ix_job_cards_status", table_name="job_cards")
    op.drop_table("job_cards")

    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_preferred_date", table_name="bookings")
    op.drop_index("ix_bookings_service_type", table_name="bookings")
    op.drop_index("ix_bookings_vehicle_type", table_name="bookings")
    op.drop_table("bookings")
