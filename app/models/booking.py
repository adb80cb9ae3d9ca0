import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_code = Column(String, nullable=False, unique=True)

    customer_name = Column(String, nullable=False)
    mobile = Column(String, nullable=False)

    vehicle_type = Column(String, nullable=False, index=True)
    vehicle_brand = Column(String, nullable=False)
    vehicle_model = Column(String, nullable=False, default="")
    vehicle_number = Column(String, nullable=False, default="")

    service_type = Column(String, nullable=False, index=True)
    other_description = Column(Text, nullable=True)
    preferred_date = Column(Date, nullable=False, index=True)
    preferred_time = Column(String, nullable=False)
    additional_notes = Column(Text, nullable=True)

    status = Column(String, nullable=False, default="pending", index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    # Deleting a booking leaves its job card in place with booking_id nulled.
    job_card = relationship("JobCard", back_populates="booking", uselist=False)

    __table_args__ = (
        CheckConstraint(
            "status in ('pending','confirmed','completed')",
            name="ck_bookings_status_valid",
        ),
    )
