from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps.auth import require_staff
from app.schemas.common import DeleteResponse
from app.schemas.staff import (
    AttendanceListResponse,
    AttendanceMark,
    AttendanceMutationResponse,
    AttendanceResponse,
    SalarySummaryResponse,
    StaffCreate,
    StaffDetailResponse,
    StaffListResponse,
    StaffMutationResponse,
    StaffResponse,
    StaffUpdate,
)
from app.services import attendance_service, staff_service

router = APIRouter(tags=["Staff"], dependencies=[Depends(require_staff)])


# ---------- Staff ----------

@router.post("/staff", response_model=StaffMutationResponse)
def create_staff(payload: StaffCreate, db: Session = Depends(get_db)):
    row = staff_service.create_staff(payload, db=db)
    return {"success": True, "staff": StaffResponse.model_validate(row)}


@router.get("/staff", response_model=StaffListResponse)
def list_staff(status: Optional[str] = None, db: Session = Depends(get_db)):
    rows = staff_service.list_staff(db=db, status=status)
    return {"staff": [StaffResponse.model_validate(r) for r in rows]}


@router.get("/staff/{staff_id}", response_model=StaffDetailResponse)
def get_staff(staff_id: str, db: Session = Depends(get_db)):
    row = staff_service.get_staff(staff_id, db=db)
    return {"staff": StaffResponse.model_validate(row)}


@router.put("/staff/{staff_id}", response_model=StaffMutationResponse)
def update_staff(staff_id: str, payload: StaffUpdate, db: Session = Depends(get_db)):
    row = staff_service.update_staff(staff_id, payload, db=db)
    return {"success": True, "staff": StaffResponse.model_validate(row)}


@router.delete("/staff/{staff_id}", response_model=DeleteResponse)
def delete_staff(staff_id: str, db: Session = Depends(get_db)):
    staff_service.delete_staff(staff_id, db=db)
    return {"success": True, "message": "Staff member deleted successfully"}


# ---------- Attendance ----------

@router.post("/attendance", response_model=AttendanceMutationResponse)
def mark_attendance(payload: AttendanceMark, db: Session = Depends(get_db)):
    row = attendance_service.mark_attendance(payload, db=db)
    return {"success": True, "attendance": AttendanceResponse.model_validate(row)}


@router.get("/attendance", response_model=AttendanceListResponse)
def list_attendance(
    staff_id: Optional[str] = None,
    on_date: Optional[date] = Query(default=None, alias="date"),
    month: Optional[str] = None,
    db: Session = Depends(get_db),
):
    rows = attendance_service.list_attendance(db=db, staff_id=staff_id, on_date=on_date, month=month)
    return {"attendance": [AttendanceResponse.model_validate(r) for r in rows]}


@router.get("/salary-summary", response_model=SalarySummaryResponse)
def salary_summary(month: Optional[str] = None, db: Session = Depends(get_db)):
    summary = attendance_service.compute_salary_summary(month, db=db)
    return {
        "month": summary.month,
        "total_salary": summary.total_salary,
        "summary": [
            {
                "staff": StaffResponse.model_validate(line.staff),
                "present_days": line.present_days,
                "half_days": line.half_days,
                "absent_days": line.absent_days,
                "total_working_days": float(line.total_working_days),
                "monthly_salary": line.monthly_salary,
                "per_day_salary": line.per_day_salary,
                "calculated_salary": line.calculated_salary,
            }
            for line in summary.lines
        ],
    }
