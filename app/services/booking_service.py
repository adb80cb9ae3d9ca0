import logging
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.booking import Booking
from app.schemas.booking import BookingCreate, WalkInCustomer
from app.services.codes import CUSTOMER_BOOKING_PREFIX, WALK_IN_BOOKING_PREFIX, generate_code
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

WALK_IN_TIME_SLOT = "Walk-in"


def _is_filter(value: Optional[str]) -> bool:
    return value is not None and value != "" and value != "all"


def get_booking(booking_id: str, *, db: Session) -> Booking:
    row = db.get(Booking, str(booking_id))
    if row is None:
        raise NotFoundError("Booking not found")
    return row


def create_booking(payload: BookingCreate, *, db: Session) -> Booking:
    with UnitOfWork(db, "create_booking"):
        row = Booking(
            booking_code=generate_code(CUSTOMER_BOOKING_PREFIX),
            status="pending",
            **payload.model_dump(),
        )
        db.add(row)

    logger.info("Booking created", extra={"booking_id": row.id, "booking_code": row.booking_code})
    return row


def add_walk_in_booking(customer: WalkInCustomer, *, db: Session) -> Booking:
    """
    Stage a synthesized booking for a walk-in job card.
    Does not commit; the caller's unit of work owns the transaction.
    """
    row = Booking(
        booking_code=generate_code(WALK_IN_BOOKING_PREFIX),
        customer_name=customer.customer_name,
        mobile=customer.mobile,
        vehicle_type=customer.vehicle_type,
        vehicle_brand=customer.vehicle_brand,
        vehicle_model=customer.vehicle_model,
        vehicle_number=customer.vehicle_number,
        service_type=customer.service_type,
        preferred_date=date.today(),
        preferred_time=WALK_IN_TIME_SLOT,
        status="confirmed",
    )
    db.add(row)
    return row


def list_bookings(
    *,
    db: Session,
    status: Optional[str] = None,
    vehicle_type: Optional[str] = None,
    service_type: Optional[str] = None,
    preferred_date: Optional[date] = None,
) -> list[Booking]:
    q = db.query(Booking)

    if _is_filter(status):
        q = q.filter(Booking.status == str(status))
    if _is_filter(vehicle_type):
        q = q.filter(Booking.vehicle_type == str(vehicle_type))
    if _is_filter(service_type):
        q = q.filter(Booking.service_type == str(service_type))
    if preferred_date is not None:
        q = q.filter(Booking.preferred_date == preferred_date)

    return q.order_by(Booking.created_at.desc()).all()


def update_booking_status(booking_id: str, status: str, *, db: Session) -> Booking:
    with UnitOfWork(db, "update_booking_status"):
        row = get_booking(booking_id, db=db)
        row.status = status
    return row


def delete_booking(booking_id: str, *, db: Session) -> None:
    with UnitOfWork(db, "delete_booking"):
        row = get_booking(booking_id, db=db)
        db.delete(row)
    logger.info("Booking deleted", extra={"booking_id": booking_id})


def booking_stats(*, db: Session) -> dict[str, int]:
    by_status = dict(
        db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
    )
    by_vehicle = dict(
        db.query(Booking.vehicle_type, func.count(Booking.id)).group_by(Booking.vehicle_type).all()
    )
    return {
        "total": int(sum(by_status.values())),
        "pending": int(by_status.get("pending", 0)),
        "confirmed": int(by_status.get("confirmed", 0)),
        "completed": int(by_status.get("completed", 0)),
        "two_wheeler": int(by_vehicle.get("Two Wheeler", 0)),
        "four_wheeler": int(by_vehicle.get("Four Wheeler", 0)),
    }
