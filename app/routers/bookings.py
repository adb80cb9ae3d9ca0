from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps.auth import require_staff
from app.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingMutationResponse,
    BookingResponse,
    BookingStatsResponse,
    BookingStatusUpdate,
)
from app.schemas.common import DeleteResponse
from app.services import booking_service

router = APIRouter(tags=["Bookings"])


@router.post("/bookings", response_model=BookingMutationResponse)
def create_booking(payload: BookingCreate, db: Session = Depends(get_db)):
    row = booking_service.create_booking(payload, db=db)
    return {"success": True, "booking": BookingResponse.model_validate(row)}


@router.get("/bookings", response_model=BookingListResponse, dependencies=[Depends(require_staff)])
def list_bookings(
    status: Optional[str] = None,
    vehicle_type: Optional[str] = None,
    service_type: Optional[str] = None,
    preferred_date: Optional[date] = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
):
    rows = booking_service.list_bookings(
        db=db,
        status=status,
        vehicle_type=vehicle_type,
        service_type=service_type,
        preferred_date=preferred_date,
    )
    return {"bookings": [BookingResponse.model_validate(r) for r in rows]}


@router.get("/bookings/{booking_id}", response_model=BookingDetailResponse, dependencies=[Depends(require_staff)])
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    row = booking_service.get_booking(booking_id, db=db)
    return {"booking": BookingResponse.model_validate(row)}


@router.put("/bookings/{booking_id}", response_model=BookingMutationResponse, dependencies=[Depends(require_staff)])
def update_booking_status(booking_id: str, payload: BookingStatusUpdate, db: Session = Depends(get_db)):
    row = booking_service.update_booking_status(booking_id, payload.status, db=db)
    return {"success": True, "booking": BookingResponse.model_validate(row)}


@router.delete("/bookings/{booking_id}", response_model=DeleteResponse, dependencies=[Depends(require_staff)])
def delete_booking(booking_id: str, db: Session = Depends(get_db)):
    booking_service.delete_booking(booking_id, db=db)
    return {"success": True, "message": "Booking deleted successfully"}


@router.get("/stats", response_model=BookingStatsResponse, dependencies=[Depends(require_staff)])
def booking_stats(db: Session = Depends(get_db)):
    return {"stats": booking_service.booking_stats(db=db)}
