import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)
    mobile = Column(String, nullable=True)
    monthly_salary = Column(Numeric(12, 2), nullable=False, default=0)
    joining_date = Column(Date, nullable=False, default=date.today)
    status = Column(String, nullable=False, default="active", index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    attendance = relationship(
        "AttendanceRecord",
        back_populates="staff",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("status in ('active','inactive')", name="ck_staff_status_valid"),
    )
