import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base


class InventoryCategory(Base):
    __tablename__ = "inventory_categories"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    item_name = Column(String, nullable=False, index=True)
    category_id = Column(
        String,
        ForeignKey("inventory_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    vehicle_compatibility = Column(String, nullable=False, default="Both")
    purchase_price = Column(Numeric(12, 2), nullable=False, default=0)
    selling_price = Column(Numeric(12, 2), nullable=False, default=0)
    quantity_in_stock = Column(Integer, nullable=False, default=0)
    min_stock_alert = Column(Integer, nullable=False, default=5)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    category = relationship("InventoryCategory")
    # Deleting an item nulls the inventory reference on billed lines.
    billing_items = relationship("BillingItem")
    purchases = relationship(
        "Purchase",
        back_populates="inventory_item",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("quantity_in_stock >= 0", name="ck_inventory_quantity_nonnegative"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.quantity_in_stock <= self.min_stock_alert
