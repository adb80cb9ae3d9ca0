import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.staff import Staff
from app.schemas.staff import StaffCreate, StaffUpdate
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def get_staff(staff_id: str, *, db: Session) -> Staff:
    row = db.get(Staff, str(staff_id))
    if row is None:
        raise NotFoundError("Staff member not found")
    return row


def list_staff(*, db: Session, status: Optional[str] = None) -> list[Staff]:
    q = db.query(Staff)
    if status is not None and status not in ("", "all"):
        q = q.filter(Staff.status == str(status))
    return q.order_by(Staff.name.asc()).all()


def create_staff(payload: StaffCreate, *, db: Session) -> Staff:
    with UnitOfWork(db, "create_staff"):
        row = Staff(
            name=payload.name,
            role=payload.role,
            mobile=payload.mobile,
            monthly_salary=payload.monthly_salary,
            joining_date=payload.joining_date or date.today(),
            status="active",
        )
        db.add(row)

    logger.info("Staff member created", extra={"staff_id": row.id})
    return row


def update_staff(staff_id: str, payload: StaffUpdate, *, db: Session) -> Staff:
    with UnitOfWork(db, "update_staff"):
        row = get_staff(staff_id, db=db)
        row.name = payload.name
        row.role = payload.role
        row.mobile = payload.mobile
        row.monthly_salary = payload.monthly_salary
        row.status = payload.status
        if payload.joining_date is not None:
            row.joining_date = payload.joining_date
    return row


def delete_staff(staff_id: str, *, db: Session) -> None:
    with UnitOfWork(db, "delete_staff"):
        row = get_staff(staff_id, db=db)
        db.delete(row)
    logger.info("Staff member deleted", extra={"staff_id": staff_id})
