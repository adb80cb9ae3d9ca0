import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, joinedload

from app.core.errors import StorageError, ValidationError
from app.models.attendance import AttendanceRecord
from app.models.staff import Staff
from app.schemas.staff import AttendanceMark
from app.services import staff_service
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

# Flat divisor regardless of the month's real length.
SALARY_DIVISOR_DAYS = Decimal(30)
HALF_DAY_WEIGHT = Decimal("0.5")

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def month_bounds(month: Optional[str]) -> tuple[date, date]:
    """'YYYY-MM' -> (first day, last day) inclusive."""
    if not month:
        raise ValidationError("Month is required")

    match = _MONTH_RE.match(month.strip())
    if match is None:
        raise ValidationError("Month must be formatted as YYYY-MM")

    year, mon = int(match.group(1)), int(match.group(2))
    if not 1 <= mon <= 12:
        raise ValidationError("Month must be formatted as YYYY-MM")

    last_day = calendar.monthrange(year, mon)[1]
    return date(year, mon, 1), date(year, mon, last_day)


# ---------- Attendance ----------

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _attendance_upsert(db: Session, payload: AttendanceMark, staff_id: str):
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise StorageError(f"Attendance upsert is not supported on {dialect}")

    stmt = insert(AttendanceRecord).values(
        staff_id=staff_id,
        date=payload.date,
        status=payload.status,
        notes=payload.notes,
    )
    return stmt.on_conflict_do_update(
        index_elements=[AttendanceRecord.staff_id, AttendanceRecord.date],
        set_={
            "status": stmt.excluded.status,
            "notes": stmt.excluded.notes,
            "updated_at": datetime.utcnow(),
        },
    )


def mark_attendance(payload: AttendanceMark, *, db: Session) -> AttendanceRecord:
    """
    Upsert keyed on (staff, date): a later mark replaces the earlier one.
    Runs as a single INSERT .. ON CONFLICT DO UPDATE, so concurrent marks for
    the same day never conflict; the last writer wins.
    """
    with UnitOfWork(db, "mark_attendance") as uow:
        staff = staff_service.get_staff(payload.staff_id, db=db)

        db.execute(_attendance_upsert(db, payload, staff.id))
        uow.step()

        record = (
            db.query(AttendanceRecord)
            .populate_existing()
            .filter(
                AttendanceRecord.staff_id == staff.id,
                AttendanceRecord.date == payload.date,
            )
            .one()
        )

    return record


def list_attendance(
    *,
    db: Session,
    staff_id: Optional[str] = None,
    on_date: Optional[date] = None,
    month: Optional[str] = None,
) -> list[AttendanceRecord]:
    q = db.query(AttendanceRecord).options(joinedload(AttendanceRecord.staff))

    if staff_id:
        q = q.filter(AttendanceRecord.staff_id == str(staff_id))
    if on_date is not None:
        q = q.filter(AttendanceRecord.date == on_date)
    if month:
        start, end = month_bounds(month)
        q = q.filter(AttendanceRecord.date >= start, AttendanceRecord.date <= end)

    return q.order_by(AttendanceRecord.date.desc()).all()


# ---------- Salary ----------

@dataclass(frozen=True)
class SalaryLine:
    staff: Staff
    present_days: int
    half_days: int
    absent_days: int
    total_working_days: Decimal
    monthly_salary: Decimal
    per_day_salary: Decimal
    calculated_salary: int


@dataclass(frozen=True)
class SalarySummary:
    month: str
    lines: list[SalaryLine]

    @property
    def total_salary(self) -> int:
        return sum(line.calculated_salary for line in self.lines)


def working_days(present_days: int, half_days: int) -> Decimal:
    return Decimal(present_days) + HALF_DAY_WEIGHT * Decimal(half_days)


def per_day_salary(monthly_salary: Decimal) -> Decimal:
    return (Decimal(monthly_salary) / SALARY_DIVISOR_DAYS).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def prorated_salary(monthly_salary: Decimal, total_working_days: Decimal) -> int:
    """
    round_half_up(monthly_salary / 30 * days), computed as
    monthly_salary * days / 30 so 10000 over 1.5 days is exactly 500.
    """
    amount = Decimal(monthly_salary) * Decimal(total_working_days) / SALARY_DIVISOR_DAYS
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_salary_summary(month: Optional[str], *, db: Session) -> SalarySummary:
    """
    One line per active staff member. Unmarked days count as neither present
    nor absent and contribute nothing.
    """
    start, end = month_bounds(month)

    staff_rows = (
        db.query(Staff)
        .filter(Staff.status == "active")
        .order_by(Staff.name.asc())
        .all()
    )

    counts: dict[str, dict[str, int]] = {}
    rows = (
        db.query(
            AttendanceRecord.staff_id,
            AttendanceRecord.status,
            func.count(AttendanceRecord.id),
        )
        .filter(AttendanceRecord.date >= start, AttendanceRecord.date <= end)
        .group_by(AttendanceRecord.staff_id, AttendanceRecord.status)
        .all()
    )
    for staff_id, status, count in rows:
        counts.setdefault(staff_id, {})[status] = int(count)

    lines = []
    for staff in staff_rows:
        by_status = counts.get(staff.id, {})
        present = by_status.get("present", 0)
        half = by_status.get("half_day", 0)
        absent = by_status.get("absent", 0)
        days = working_days(present, half)
        monthly = Decimal(staff.monthly_salary)

        lines.append(
            SalaryLine(
                staff=staff,
                present_days=present,
                half_days=half,
                absent_days=absent,
                total_working_days=days,
                monthly_salary=monthly,
                per_day_salary=per_day_salary(monthly),
                calculated_salary=prorated_salary(monthly, days),
            )
        )

    summary = SalarySummary(month=month.strip(), lines=lines)
    logger.info(
        "Salary summary computed",
        extra={"month": summary.month, "staff_count": len(lines), "total_salary": summary.total_salary},
    )
    return summary
