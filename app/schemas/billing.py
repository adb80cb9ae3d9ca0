from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.job_card import JobCardResponse

PaymentStatus = Literal["pending", "partial", "paid"]


class BillingItemIn(BaseModel):
    inventory_id: Optional[str] = None
    item_name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    # Defaults to quantity * unit_price when omitted.
    total_price: Optional[Decimal] = Field(default=None, ge=0)


class ExpenseIn(BaseModel):
    expense_name: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    notes: Optional[str] = None


class BillingCreate(BaseModel):
    job_card_id: str = Field(min_length=1)
    # Defaults to the job card's total_estimated_amount when omitted.
    job_card_total: Optional[Decimal] = Field(default=None, ge=0)
    items: list[BillingItemIn] = Field(default_factory=list)
    expenses: list[ExpenseIn] = Field(default_factory=list)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_status: PaymentStatus = "pending"
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class BillingStatusUpdate(BaseModel):
    payment_status: PaymentStatus
    payment_method: Optional[str] = None


class BillingItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    inventory_id: Optional[str]
    item_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    expense_name: str
    amount: Decimal
    notes: Optional[str]


class BillingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_card_id: str
    bill_code: str
    job_card_total: Decimal
    inventory_total: Decimal
    expenses_total: Decimal
    discount: Decimal
    final_amount: Decimal
    payment_status: str
    payment_method: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]
    items: list[BillingItemResponse]
    expenses: list[ExpenseResponse]
    job_card: Optional[JobCardResponse]


class BillingMutationResponse(BaseModel):
    success: bool = True
    billing: BillingResponse


class BillingDetailResponse(BaseModel):
    billing: BillingResponse


class BillingListResponse(BaseModel):
    billings: list[BillingResponse]
