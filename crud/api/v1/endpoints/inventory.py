from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from auth import AuthContext, get_auth_context, require_admin
from database import get_db
from schemas.inventory import InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryItemWithAvailability
from crud import inventory

router = APIRouter()

@router.post("/", response_model=InventoryItem, status_code=201)
def create_inventory_item(item: InventoryItemCreate, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    return inventory.create_inventory_item(db, item)

@router.post("/bulk", response_model=List[InventoryItem], status_code=201)
def create_inventory_items(items: List[InventoryItemCreate], db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    return inventory.create_inventory_items(db, items)

@router.get("/", response_model=List[InventoryItemWithAvailability])
def list_inventory_items(
    search: Optional[str] = None,
    availability: str = Query("all", pattern="^(all|available|unavailable)$"),
    db: Session = Depends(get_db),
    _: AuthContext = Depends(get_auth_context),
):
    return inventory.describe_inventory(db, search, availability)

@router.get("/{item_id}", response_model=InventoryItem)
def get_inventory_item(item_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(get_auth_context)):
    db_item = inventory.get_inventory_item(db, item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item is not found")
    return db_item

@router.put("/{item_id}", response_model=InventoryItem)
def update_inventory_item(item_id: int, item_update: InventoryItemUpdate, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    return inventory.update_inventory_item(db, item_id, item_update)

@router.delete("/{item_id}")
def delete_inventory_item(item_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    inventory.delete_inventory_item(db, item_id)
    return {"status": "success"}
