import logging
from sqlalchemy.orm import Session
from typing import List, Optional
from engine import from_records
from engine.availability import (
    available_count,
    compute_active_reservations,
    is_available,
    items_with_history,
    reserved_count,
)
from exceptions import NotFoundError, ReferencedError
from models.inventory import InventoryItem
from models.rental import Rental
from schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)

AVAILABILITY_FILTERS = ("all", "available", "unavailable")


def create_inventory_item(db: Session, item: InventoryItemCreate) -> InventoryItem:
    db_item = InventoryItem(**item.model_dump())
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.info("Created inventory item %s (%s)", db_item.id, db_item.name)
    return db_item

def create_inventory_items(db: Session, items: List[InventoryItemCreate]) -> List[InventoryItem]:
    db_items = [InventoryItem(**item.model_dump()) for item in items]
    if not db_items:
        return []
    db.add_all(db_items)
    db.commit()
    for db_item in db_items:
        db.refresh(db_item)
    logger.info("Created %d inventory items", len(db_items))
    return db_items

def get_inventory_item(db: Session, item_id: int) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()

def get_inventory_items(db: Session, search: Optional[str] = None) -> List[InventoryItem]:
    query = db.query(InventoryItem)

    if search:
        query = query.filter(InventoryItem.name.ilike(f'%{search}%'))

    return query.order_by(InventoryItem.id).all()

def update_inventory_item(db: Session, item_id: int, item_update: InventoryItemUpdate) -> InventoryItem:
    db_item = get_inventory_item(db, item_id)
    if db_item is None:
        raise NotFoundError("Inventory item is not found")

    update_data = item_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_item, key, value)
    db.commit()
    db.refresh(db_item)
    return db_item

def delete_inventory_item(db: Session, item_id: int) -> None:
    db_item = get_inventory_item(db, item_id)
    if db_item is None:
        raise NotFoundError("Inventory item is not found")

    # line items live in a JSON column, so there is no foreign key to lean on
    history = items_with_history(from_records(db.query(Rental).all()))
    if item_id in history:
        logger.info("Refused to delete inventory item %s: referenced by a rental", item_id)
        raise ReferencedError("Cannot delete this item because it is referenced by a rental.")

    db.delete(db_item)
    db.commit()
    logger.info("Deleted inventory item %s", item_id)

def describe_inventory(
    db: Session,
    search: Optional[str] = None,
    availability: str = "all",
) -> List[dict]:
    """Inventory rows with reservation counts derived from the current rentals."""
    items = get_inventory_items(db, search)
    rentals = from_records(db.query(Rental).all())
    reservations = compute_active_reservations(rentals)
    history = items_with_history(rentals)

    described = []
    for item in items:
        available = available_count(item, reservations)
        free = is_available(item, reservations)
        if availability == "available" and not free:
            continue
        if availability == "unavailable" and free:
            continue
        described.append({
            "id": item.id,
            "name": item.name,
            "size": item.size,
            "daily_rate": item.daily_rate,
            "total_quantity": item.total_quantity,
            "image_url": item.image_url,
            "created_at": item.created_at,
            "updated_at": item.updated_at,
            "reserved": reserved_count(item, reservations),
            "available": available,
            "is_available": free,
            "has_history": item.id in history,
        })
    return described
