from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

BookingStatus = Literal["pending", "confirmed", "completed"]


class BookingCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    mobile: str = Field(min_length=1)
    vehicle_type: str = Field(min_length=1)
    vehicle_brand: str = Field(min_length=1)
    vehicle_model: str = Field(min_length=1)
    vehicle_number: str = Field(min_length=1)
    service_type: str = Field(min_length=1)
    other_description: Optional[str] = None
    preferred_date: date
    preferred_time: str = Field(min_length=1)
    additional_notes: Optional[str] = None


class WalkInCustomer(BaseModel):
    customer_name: str = Field(min_length=1)
    mobile: str = Field(min_length=1)
    vehicle_type: str = Field(min_length=1)
    vehicle_brand: str = Field(min_length=1)
    vehicle_model: str = ""
    vehicle_number: str = ""
    service_type: str = "General Service"


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_code: str
    customer_name: str
    mobile: str
    vehicle_type: str
    vehicle_brand: str
    vehicle_model: str
    vehicle_number: str
    service_type: str
    other_description: Optional[str]
    preferred_date: date
    preferred_time: str
    additional_notes: Optional[str]
    status: str
    created_at: datetime
    updated_at: Optional[datetime]


class BookingMutationResponse(BaseModel):
    success: bool = True
    booking: BookingResponse


class BookingDetailResponse(BaseModel):
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]


class BookingStats(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int
    two_wheeler: int
    four_wheeler: int


class BookingStatsResponse(BaseModel):
    stats: BookingStats
