from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StaffStatus = Literal["active", "inactive"]
AttendanceStatus = Literal["present", "absent", "half_day"]


class StaffCreate(BaseModel):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    mobile: Optional[str] = None
    monthly_salary: Decimal = Field(default=Decimal("0"), ge=0)
    joining_date: Optional[date] = None


class StaffUpdate(BaseModel):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    mobile: Optional[str] = None
    monthly_salary: Decimal = Field(ge=0)
    status: StaffStatus = "active"
    joining_date: Optional[date] = None


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str
    mobile: Optional[str]
    monthly_salary: Decimal
    joining_date: date
    status: str
    created_at: datetime
    updated_at: Optional[datetime]


class StaffBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str


class AttendanceMark(BaseModel):
    staff_id: str = Field(min_length=1)
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    staff_id: str
    date: date
    status: str
    notes: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]
    staff: Optional[StaffBrief]


class SalarySummaryRow(BaseModel):
    staff: StaffResponse
    present_days: int
    half_days: int
    absent_days: int
    total_working_days: float
    monthly_salary: Decimal
    per_day_salary: Decimal
    calculated_salary: int


class SalarySummaryResponse(BaseModel):
    month: str
    summary: list[SalarySummaryRow]
    total_salary: int


class StaffMutationResponse(BaseModel):
    success: bool = True
    staff: StaffResponse


class StaffDetailResponse(BaseModel):
    staff: StaffResponse


class StaffListResponse(BaseModel):
    staff: list[StaffResponse]


class AttendanceMutationResponse(BaseModel):
    success: bool = True
    attendance: AttendanceResponse


class AttendanceListResponse(BaseModel):
    attendance: list[AttendanceResponse]
