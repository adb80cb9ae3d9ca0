from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps.auth import require_staff
from app.schemas.common import DeleteResponse
from app.schemas.job_card import (
    JobCardCreate,
    JobCardDetailResponse,
    JobCardListResponse,
    JobCardMutationResponse,
    JobCardResponse,
    JobCardUpdate,
)
from app.services import job_card_service

router = APIRouter(prefix="/job-cards", tags=["Job Cards"], dependencies=[Depends(require_staff)])


@router.post("", response_model=JobCardMutationResponse)
def create_job_card(payload: JobCardCreate, db: Session = Depends(get_db)):
    row = job_card_service.create_job_card(payload, db=db)
    return {"success": True, "job_card": JobCardResponse.model_validate(row)}


@router.get("", response_model=JobCardListResponse)
def list_job_cards(
    booking_id: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    rows = job_card_service.list_job_cards(db=db, booking_id=booking_id, status=status)
    return {"job_cards": [JobCardResponse.model_validate(r) for r in rows]}


@router.get("/{job_card_id}", response_model=JobCardDetailResponse)
def get_job_card(job_card_id: str, db: Session = Depends(get_db)):
    row = job_card_service.get_job_card(job_card_id, db=db)
    return {"job_card": JobCardResponse.model_validate(row)}


@router.put("/{job_card_id}", response_model=JobCardMutationResponse)
def update_job_card(job_card_id: str, payload: JobCardUpdate, db: Session = Depends(get_db)):
    row = job_card_service.update_job_card(job_card_id, payload, db=db)
    return {"success": True, "job_card": JobCardResponse.model_validate(row)}


@router.delete("/{job_card_id}", response_model=DeleteResponse)
def delete_job_card(job_card_id: str, db: Session = Depends(get_db)):
    job_card_service.delete_job_card(job_card_id, db=db)
    return {"success": True, "message": "Job card deleted successfully"}
