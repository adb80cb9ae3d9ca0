import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    inventory_id = Column(
        String,
        ForeignKey("inventory.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    purchase_price = Column(Numeric(12, 2), nullable=False)
    supplier = Column(String, nullable=True)
    purchase_date = Column(Date, nullable=False, default=date.today, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    inventory_item = relationship("InventoryItem", back_populates="purchases")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
    )
