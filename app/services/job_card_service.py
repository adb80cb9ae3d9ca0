import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.errors import ConflictError, ImmutableStateError, NotFoundError, ValidationError
from app.models.booking import Booking
from app.models.job_card import JobCard, JobCardItem
from app.schemas.job_card import JobCardCreate, JobCardItemIn, JobCardUpdate
from app.services import booking_service
from app.services.codes import JOB_CARD_PREFIX, generate_code
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _query(db: Session):
    return db.query(JobCard).options(
        joinedload(JobCard.booking),
        selectinload(JobCard.items),
    )


def get_job_card(job_card_id: str, *, db: Session) -> JobCard:
    row = _query(db).filter(JobCard.id == str(job_card_id)).one_or_none()
    if row is None:
        raise NotFoundError("Job card not found")
    return row


def list_job_cards(
    *,
    db: Session,
    booking_id: Optional[str] = None,
    status: Optional[str] = None,
) -> list[JobCard]:
    q = _query(db)

    if booking_id is not None and booking_id != "":
        q = q.filter(JobCard.booking_id == str(booking_id))
    if status is not None and status not in ("", "all"):
        q = q.filter(JobCard.status == str(status))

    return q.order_by(JobCard.created_at.desc()).all()


def _require_items(items: list[JobCardItemIn]) -> None:
    if not items:
        raise ValidationError("At least one job card item is required")
    for item in items:
        if not item.category.strip() or not item.problem_description.strip():
            raise ValidationError("Each job card item needs a category and a problem description")


def _build_items(items: list[JobCardItemIn]) -> list[JobCardItem]:
    return [
        JobCardItem(
            position=position,
            category=item.category,
            problem_description=item.problem_description,
            estimated_price=item.estimated_price,
        )
        for position, item in enumerate(items)
    ]


def _resolve_booking(payload: JobCardCreate, db: Session) -> Booking:
    if payload.is_walk_in:
        if payload.walk_in_customer is None:
            raise ValidationError("walk_in_customer is required for walk-in job cards")
        return booking_service.add_walk_in_booking(payload.walk_in_customer, db=db)

    if not payload.booking_id:
        raise ValidationError("booking_id is required unless is_walk_in is set")

    booking = booking_service.get_booking(payload.booking_id, db=db)

    existing = db.query(JobCard.id).filter(JobCard.booking_id == booking.id).first()
    if existing is not None:
        raise ConflictError("Job card already exists for this booking")

    return booking


def create_job_card(payload: JobCardCreate, *, db: Session) -> JobCard:
    """
    Stages: (walk-in booking) -> job card -> items.

    The stored total is the caller-supplied total_estimated_amount; it is not
    recomputed from the item prices.
    """
    _require_items(payload.items)

    with UnitOfWork(db, "create_job_card") as uow:
        booking = _resolve_booking(payload, db)
        if payload.is_walk_in:
            uow.step()

        job_card = JobCard(
            booking=booking,
            job_card_code=generate_code(JOB_CARD_PREFIX),
            categories=list(payload.categories),
            total_estimated_amount=payload.total_estimated_amount,
            status=payload.status,
        )
        db.add(job_card)
        try:
            uow.step()
        except IntegrityError as exc:
            # Lost a race against another job card for the same booking.
            raise ConflictError("Job card already exists for this booking") from exc

        job_card.items.extend(_build_items(payload.items))
        uow.step()

    logger.info(
        "Job card created",
        extra={
            "job_card_id": job_card.id,
            "booking_id": job_card.booking_id,
            "walk_in": payload.is_walk_in,
        },
    )
    return job_card


def update_job_card(job_card_id: str, payload: JobCardUpdate, *, db: Session) -> JobCard:
    with UnitOfWork(db, "update_job_card") as uow:
        job_card = get_job_card(job_card_id, db=db)

        if job_card.status == "billed":
            raise ImmutableStateError("Cannot edit a billed job card")

        _require_items(payload.items)

        job_card.categories = list(payload.categories)
        if payload.total_estimated_amount is not None:
            job_card.total_estimated_amount = payload.total_estimated_amount
        job_card.status = payload.status

        # Full replacement: delete every existing item, then insert the new set.
        job_card.items.clear()
        uow.step()

        job_card.items.extend(_build_items(payload.items))
        uow.step()

    return job_card


def delete_job_card(job_card_id: str, *, db: Session) -> None:
    with UnitOfWork(db, "delete_job_card"):
        job_card = get_job_card(job_card_id, db=db)

        if job_card.status == "billed":
            logger.warning(
                "Deleting a billed job card removes its billing",
                extra={"job_card_id": job_card.id},
            )

        db.delete(job_card)

    logger.info("Job card deleted", extra={"job_card_id": job_card_id})


def mark_billed(job_card: JobCard) -> None:
    job_card.status = "billed"
    logger.info("Job card billed", extra={"job_card_id": job_card.id})


def reopen_after_billing_delete(job_card: JobCard) -> None:
    job_card.status = "finalized"
