from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.booking import BookingResponse, WalkInCustomer

# "billed" is reachable only through billing creation.
EditableJobCardStatus = Literal["draft", "finalized"]


class JobCardItemIn(BaseModel):
    category: str = Field(min_length=1)
    problem_description: str = Field(min_length=1)
    estimated_price: Decimal = Field(default=Decimal("0"), ge=0)


class JobCardCreate(BaseModel):
    booking_id: Optional[str] = None
    is_walk_in: bool = False
    walk_in_customer: Optional[WalkInCustomer] = None
    categories: list[str] = Field(default_factory=list)
    items: list[JobCardItemIn] = Field(default_factory=list)
    # Stored as supplied; not recomputed from items.
    total_estimated_amount: Decimal = Field(default=Decimal("0"), ge=0)
    status: EditableJobCardStatus = "finalized"


class JobCardUpdate(BaseModel):
    categories: list[str] = Field(default_factory=list)
    items: list[JobCardItemIn] = Field(default_factory=list)
    total_estimated_amount: Optional[Decimal] = Field(default=None, ge=0)
    status: EditableJobCardStatus = "draft"


class JobCardItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_card_id: str
    position: int
    category: str
    problem_description: str
    estimated_price: Decimal


class JobCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_id: Optional[str]
    job_card_code: str
    categories: list[str]
    total_estimated_amount: Decimal
    status: str
    created_at: datetime
    updated_at: Optional[datetime]
    booking: Optional[BookingResponse]
    items: list[JobCardItemResponse]


class JobCardMutationResponse(BaseModel):
    success: bool = True
    job_card: JobCardResponse


class JobCardDetailResponse(BaseModel):
    job_card: JobCardResponse


class JobCardListResponse(BaseModel):
    job_cards: list[JobCardResponse]
