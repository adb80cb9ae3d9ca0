from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps.auth import require_staff
from app.schemas.common import DeleteResponse
from app.schemas.inventory import (
    CategoryCreate,
    CategoryListResponse,
    CategoryMutationResponse,
    CategoryResponse,
    InventoryItemDetailResponse,
    InventoryItemMutationResponse,
    InventoryItemResponse,
    InventoryItemWrite,
    InventoryListResponse,
    PurchaseCreate,
    PurchaseListResponse,
    PurchaseMutationResponse,
    PurchaseResponse,
)
from app.services import inventory_service

router = APIRouter(tags=["Inventory"], dependencies=[Depends(require_staff)])


# ---------- Categories ----------

@router.post("/inventory/categories", response_model=CategoryMutationResponse)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    row = inventory_service.create_category(payload, db=db)
    return {"success": True, "category": CategoryResponse.model_validate(row)}


@router.get("/inventory/categories", response_model=CategoryListResponse)
def list_categories(db: Session = Depends(get_db)):
    rows = inventory_service.list_categories(db=db)
    return {"categories": [CategoryResponse.model_validate(r) for r in rows]}


# ---------- Items ----------

@router.post("/inventory", response_model=InventoryItemMutationResponse)
def create_item(payload: InventoryItemWrite, db: Session = Depends(get_db)):
    row = inventory_service.create_item(payload, db=db)
    return {"success": True, "item": InventoryItemResponse.model_validate(row)}


@router.get("/inventory", response_model=InventoryListResponse)
def list_items(
    category_id: Optional[str] = None,
    low_stock: bool = False,
    db: Session = Depends(get_db),
):
    rows = inventory_service.list_items(db=db, category_id=category_id, low_stock=low_stock)
    return {"inventory": [InventoryItemResponse.model_validate(r) for r in rows]}


@router.get("/inventory/{item_id}", response_model=InventoryItemDetailResponse)
def get_item(item_id: str, db: Session = Depends(get_db)):
    row = inventory_service.get_item(item_id, db=db)
    return {"item": InventoryItemResponse.model_validate(row)}


@router.put("/inventory/{item_id}", response_model=InventoryItemMutationResponse)
def update_item(item_id: str, payload: InventoryItemWrite, db: Session = Depends(get_db)):
    row = inventory_service.update_item(item_id, payload, db=db)
    return {"success": True, "item": InventoryItemResponse.model_validate(row)}


@router.delete("/inventory/{item_id}", response_model=DeleteResponse)
def delete_item(item_id: str, db: Session = Depends(get_db)):
    inventory_service.delete_item(item_id, db=db)
    return {"success": True, "message": "Inventory item deleted successfully"}


# ---------- Purchases ----------

@router.post("/purchases", response_model=PurchaseMutationResponse)
def record_purchase(payload: PurchaseCreate, db: Session = Depends(get_db)):
    row = inventory_service.record_purchase(payload, db=db)
    return {"success": True, "purchase": PurchaseResponse.model_validate(row)}


@router.get("/purchases", response_model=PurchaseListResponse)
def list_purchases(inventory_id: Optional[str] = None, db: Session = Depends(get_db)):
    rows = inventory_service.list_purchases(db=db, inventory_id=inventory_id)
    return {"purchases": [PurchaseResponse.model_validate(r) for r in rows]}
