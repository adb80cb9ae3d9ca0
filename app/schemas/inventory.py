from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class InventoryItemWrite(BaseModel):
    """Body for both create and full-replace update."""

    item_name: str = Field(min_length=1)
    category_id: Optional[str] = None
    vehicle_compatibility: str = "Both"
    purchase_price: Decimal = Field(default=Decimal("0"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    # Negative values are clamped to zero on write.
    quantity_in_stock: int = 0
    min_stock_alert: int = Field(default=5, ge=0)


class InventoryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    item_name: str
    category_id: Optional[str]
    vehicle_compatibility: str
    purchase_price: Decimal
    selling_price: Decimal
    quantity_in_stock: int
    min_stock_alert: int
    is_low_stock: bool
    created_at: datetime
    updated_at: Optional[datetime]
    category: Optional[CategoryResponse]


class InventoryItemBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    item_name: str


class PurchaseCreate(BaseModel):
    inventory_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    purchase_price: Decimal = Field(ge=0)
    supplier: Optional[str] = None
    purchase_date: Optional[date] = None
    notes: Optional[str] = None


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    inventory_id: str
    quantity: int
    purchase_price: Decimal
    supplier: Optional[str]
    purchase_date: date
    notes: Optional[str]
    created_at: datetime
    inventory_item: Optional[InventoryItemBrief]


class CategoryMutationResponse(BaseModel):
    success: bool = True
    category: CategoryResponse


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]


class InventoryItemMutationResponse(BaseModel):
    success: bool = True
    item: InventoryItemResponse


class InventoryItemDetailResponse(BaseModel):
    item: InventoryItemResponse


class InventoryListResponse(BaseModel):
    inventory: list[InventoryItemResponse]


class PurchaseMutationResponse(BaseModel):
    success: bool = True
    purchase: PurchaseResponse


class PurchaseListResponse(BaseModel):
    purchases: list[PurchaseResponse]
