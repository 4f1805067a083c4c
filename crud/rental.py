import logging
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional
from config import settings
from crud import customer as customer_crud
from engine.availability import compute_active_reservations, max_selectable_quantity
from engine.dates import local_date, to_utc, utcnow
from engine.pricing import estimate_live_price, is_overdue, rate_table, revise_rental, settle_rental
from engine.rentals import ActiveRental, LineItem, Rental as RentalValue, from_record, from_records, parse_line_items, validate_terms
from exceptions import NotFoundError, ValidationError
from models.customer import Customer
from models.inventory import InventoryItem
from models.rental import Rental, RentalStatus
from schemas.rental import RentalCreate, RentalUpdate

logger = logging.getLogger(__name__)


def get_rental(db: Session, rental_id: int) -> Optional[Rental]:
    return db.query(Rental).filter(Rental.id == rental_id).first()

def get_rentals(db: Session) -> List[Rental]:
    return db.query(Rental).order_by(Rental.rental_date.desc(), Rental.id.desc()).all()

def check_reservations(
    db: Session,
    line_items: Iterable[LineItem],
    editing: Optional[ActiveRental] = None,
) -> None:
    """Refuse line items that ask for more units than are free right now."""
    items = {item.id: item for item in db.query(InventoryItem).all()}
    reservations = compute_active_reservations(from_records(db.query(Rental).all()))

    for line in line_items:
        item = items.get(line.item_id)
        if item is None:
            raise ValidationError(f"Inventory item {line.item_id} does not exist")
        limit = max_selectable_quantity(item, reservations, editing)
        if line.quantity > limit:
            raise ValidationError(
                f"Only {max(limit, 0)} of '{item.name}' available, {line.quantity} requested"
            )

def _store_line_items(line_items: Iterable[LineItem]) -> List[dict]:
    return [line.to_dict() for line in line_items]

def create_rental(db: Session, rental: RentalCreate) -> Rental:
    line_items = parse_line_items(rental.line_items)
    validate_terms(line_items, rental.rental_date, rental.due_date, rental.discount_percent, settings.shop_tz)
    check_reservations(db, line_items)

    try:
        if rental.new_customer is not None:
            db_customer = customer_crud.create_customer(db, rental.new_customer, commit=False)
            customer_id = db_customer.id
        else:
            if customer_crud.get_customer(db, rental.customer_id) is None:
                raise ValidationError(f"Customer {rental.customer_id} does not exist")
            customer_id = rental.customer_id

        db_rental = Rental(
            customer_id=customer_id,
            line_items=_store_line_items(line_items),
            rental_date=to_utc(rental.rental_date),
            due_date=to_utc(rental.due_date),
            discount_percent=rental.discount_percent,
            notes=rental.notes,
        )
        db.add(db_rental)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_rental)
    logger.info("Created rental %s for customer %s", db_rental.id, customer_id)
    return db_rental

def update_rental(db: Session, rental_id: int, rental_update: RentalUpdate) -> Rental:
    db_rental = get_rental(db, rental_id)
    if db_rental is None:
        raise NotFoundError("Rental not found")

    current = from_record(db_rental)
    changes = rental_update.model_dump(exclude_unset=True)
    if changes.get("line_items") is not None:
        changes["line_items"] = parse_line_items(changes["line_items"])
    revised = revise_rental(current, tz=settings.shop_tz, **changes)

    if revised.customer_id != current.customer_id and customer_crud.get_customer(db, revised.customer_id) is None:
        raise ValidationError(f"Customer {revised.customer_id} does not exist")
    if changes.get("line_items") is not None:
        check_reservations(db, revised.line_items, editing=current)

    try:
        db_rental.customer_id = revised.customer_id
        db_rental.line_items = _store_line_items(revised.line_items)
        db_rental.rental_date = to_utc(revised.rental_date)
        db_rental.due_date = to_utc(revised.due_date)
        db_rental.discount_percent = revised.discount_percent
        db_rental.notes = revised.notes
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_rental)
    return db_rental

def return_rental(
    db: Session,
    rental_id: int,
    surcharge: Decimal = Decimal(0),
    return_date: Optional[datetime] = None,
) -> Rental:
    db_rental = get_rental(db, rental_id)
    if db_rental is None:
        raise NotFoundError("Rental not found")

    rates = rate_table(db.query(InventoryItem).all())
    settled = settle_rental(from_record(db_rental), rates, return_date, surcharge, settings.shop_tz)

    try:
        db_rental.return_date = to_utc(settled.return_date)
        db_rental.surcharge = settled.surcharge
        db_rental.total_price = settled.total_price
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to record return of rental %s", rental_id)
        raise

    db.refresh(db_rental)
    logger.info("Rental %s returned, total %s", rental_id, settled.total_price)
    return db_rental

def delete_rental(db: Session, rental_id: int) -> None:
    db_rental = get_rental(db, rental_id)
    if db_rental is None:
        raise NotFoundError("Rental not found")
    db.delete(db_rental)
    db.commit()

def _format_day(value: datetime) -> str:
    return local_date(value, settings.shop_tz).strftime("%d/%m/%Y")

def _matches_search(
    record: Rental,
    value: RentalValue,
    term: str,
    customer_names: Dict[int, str],
    item_names: Dict[int, str],
) -> bool:
    if term in customer_names.get(value.customer_id, "").lower():
        return True
    if any(term in item_names.get(line.item_id, "").lower() for line in value.line_items):
        return True
    dates = [record.rental_date, record.due_date, record.return_date]
    return any(term in _format_day(d) for d in dates if d is not None)

def describe_rentals(
    db: Session,
    records: Optional[List[Rental]] = None,
    status: Optional[RentalStatus] = None,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[dict]:
    """Rental rows for display, with state, overdue flag and live estimate derived on the spot."""
    if records is None:
        records = get_rentals(db)
    now = now or utcnow()
    items = db.query(InventoryItem).all()
    rates = rate_table(items)
    item_names = {item.id: item.name for item in items}
    customer_names = {c.id: c.name for c in db.query(Customer).all()}
    term = search.lower() if search else None

    described = []
    for record in records:
        value = from_record(record)
        active = isinstance(value, ActiveRental)
        overdue = is_overdue(value, now)

        if status == RentalStatus.ACTIVE and not active:
            continue
        if status == RentalStatus.SETTLED and active:
            continue
        if status == RentalStatus.OVERDUE and not overdue:
            continue
        if term and not _matches_search(record, value, term, customer_names, item_names):
            continue

        described.append({
            "id": record.id,
            "customer_id": record.customer_id,
            "customer_name": customer_names.get(record.customer_id),
            "line_items": [line.to_dict() for line in value.line_items],
            "rental_date": record.rental_date,
            "due_date": record.due_date,
            "return_date": record.return_date,
            "discount_percent": record.discount_percent,
            "surcharge": record.surcharge,
            "total_price": record.total_price,
            "notes": record.notes,
            "status": RentalStatus.ACTIVE if active else RentalStatus.SETTLED,
            "is_overdue": overdue,
            "estimated_price": estimate_live_price(value, rates, now, settings.shop_tz) if active else None,
        })
    return described

def describe_rental(db: Session, record: Rental, now: Optional[datetime] = None) -> dict:
    return describe_rentals(db, records=[record], now=now)[0]
