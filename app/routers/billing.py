from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps.auth import require_staff
from app.schemas.billing import (
    BillingCreate,
    BillingDetailResponse,
    BillingListResponse,
    BillingMutationResponse,
    BillingResponse,
    BillingStatusUpdate,
)
from app.schemas.common import DeleteResponse
from app.services import billing_service

router = APIRouter(prefix="/billing", tags=["Billing"], dependencies=[Depends(require_staff)])


def _load(billing_id: str, db: Session) -> BillingResponse:
    return BillingResponse.model_validate(billing_service.get_billing(billing_id, db=db))


@router.post("", response_model=BillingMutationResponse)
def create_billing(payload: BillingCreate, db: Session = Depends(get_db)):
    row = billing_service.create_billing(payload, db=db)
    return {"success": True, "billing": _load(row.id, db)}


@router.get("", response_model=BillingListResponse)
def list_billings(
    job_card_id: Optional[str] = None,
    payment_status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    rows = billing_service.list_billings(db=db, job_card_id=job_card_id, payment_status=payment_status)
    return {"billings": [BillingResponse.model_validate(r) for r in rows]}


@router.get("/{billing_id}", response_model=BillingDetailResponse)
def get_billing(billing_id: str, db: Session = Depends(get_db)):
    return {"billing": _load(billing_id, db)}


@router.put("/{billing_id}", response_model=BillingMutationResponse)
def update_billing_status(billing_id: str, payload: BillingStatusUpdate, db: Session = Depends(get_db)):
    row = billing_service.update_billing_status(
        billing_id,
        payload.payment_status,
        payload.payment_method,
        db=db,
    )
    return {"success": True, "billing": BillingResponse.model_validate(row)}


@router.delete("/{billing_id}", response_model=DeleteResponse)
def delete_billing(billing_id: str, db: Session = Depends(get_db)):
    billing_service.delete_billing(billing_id, db=db)
    return {"success": True, "message": "Billing deleted successfully"}
