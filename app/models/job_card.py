import uuid
from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class JobCard(Base):
    __tablename__ = "job_cards"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_id = Column(
        String,
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    job_card_code = Column(String, nullable=False, unique=True)
    categories = Column(JSON, nullable=False, default=list)
    total_estimated_amount = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="finalized", index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    booking = relationship("Booking", back_populates="job_card")
    items = relationship(
        "JobCardItem",
        back_populates="job_card",
        cascade="all, delete-orphan",
        order_by="JobCardItem.position",
    )
    billing = relationship(
        "Billing",
        back_populates="job_card",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "status in ('draft','finalized','billed')",
            name="ck_job_cards_status_valid",
        ),
    )


class JobCardItem(Base):
    __tablename__ = "job_card_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job_card_id = Column(
        String,
        ForeignKey("job_cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=False)
    problem_description = Column(Text, nullable=False)
    estimated_price = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    job_card = relationship("JobCard", back_populates="items")
