"""
Rental values used by the pricing and availability engines.

A rental is either an ``ActiveRental`` (items still out, price only ever
estimated) or a ``SettledRental`` (returned, price frozen). Stored rows carry
the state implicitly through ``return_date``; ``from_record`` turns a row
into the matching variant so the rest of the code never has to check for a
missing field to find out which state it is looking at.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple, Union

from engine.dates import local_date
from exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineItem:
    item_id: int
    quantity: int

    def to_dict(self) -> dict:
        return {"item_id": self.item_id, "quantity": self.quantity}


@dataclass(frozen=True)
class ActiveRental:
    id: Optional[int]
    customer_id: int
    line_items: Tuple[LineItem, ...]
    rental_date: datetime
    due_date: datetime
    discount_percent: Optional[Decimal]
    notes: Optional[str]

    @property
    def is_active(self) -> bool:
        return True


@dataclass(frozen=True)
class SettledRental:
    id: Optional[int]
    customer_id: int
    line_items: Tuple[LineItem, ...]
    rental_date: datetime
    due_date: datetime
    discount_percent: Optional[Decimal]
    notes: Optional[str]
    return_date: datetime
    surcharge: Decimal
    total_price: Decimal

    @property
    def is_active(self) -> bool:
        return False


Rental = Union[ActiveRental, SettledRental]


def parse_line_items(raw: Iterable[Any]) -> Tuple[LineItem, ...]:
    """Accepts LineItem values, pydantic models or the dicts stored in the JSON column."""
    items: List[LineItem] = []
    for entry in raw or []:
        if isinstance(entry, LineItem):
            items.append(entry)
            continue
        if isinstance(entry, dict):
            item_id = entry.get("item_id", entry.get("itemId"))
            quantity = entry.get("quantity")
        else:
            item_id = getattr(entry, "item_id", None)
            quantity = getattr(entry, "quantity", None)
        if item_id is None or quantity is None:
            raise ValidationError(f"Malformed line item: {entry!r}")
        items.append(LineItem(item_id=int(item_id), quantity=int(quantity)))
    return tuple(items)


def validate_terms(
    line_items: Tuple[LineItem, ...],
    rental_date: Optional[datetime],
    due_date: Optional[datetime],
    discount_percent: Optional[Decimal],
    tz: Optional[tzinfo] = None,
) -> None:
    if not line_items:
        raise ValidationError("A rental needs at least one item")

    seen = set()
    for line in line_items:
        if line.quantity < 1:
            raise ValidationError(f"Quantity for item {line.item_id} must be at least 1")
        if line.item_id in seen:
            raise ValidationError(f"Item {line.item_id} appears more than once")
        seen.add(line.item_id)

    if rental_date is None:
        raise ValidationError("Rental date is required")
    if due_date is None:
        raise ValidationError("Due date is required")
    if local_date(due_date, tz) < local_date(rental_date, tz):
        raise ValidationError("Due date cannot be before the rental date")

    if discount_percent is not None and not (0 <= discount_percent <= 100):
        raise ValidationError("Discount must be between 0 and 100 percent")


def from_record(record: Any) -> Rental:
    line_items = parse_line_items(record.line_items)
    discount = record.discount_percent
    discount = Decimal(discount) if discount is not None else None

    if record.return_date is None:
        return ActiveRental(
            id=record.id,
            customer_id=record.customer_id,
            line_items=line_items,
            rental_date=record.rental_date,
            due_date=record.due_date,
            discount_percent=discount,
            notes=record.notes,
        )

    total_price = record.total_price
    if total_price is None:
        # returned before prices were stored with the rental
        logger.warning("Settled rental %s has no stored total price", record.id)
        total_price = Decimal(0)

    return SettledRental(
        id=record.id,
        customer_id=record.customer_id,
        line_items=line_items,
        rental_date=record.rental_date,
        due_date=record.due_date,
        discount_percent=discount,
        notes=record.notes,
        return_date=record.return_date,
        surcharge=Decimal(record.surcharge or 0),
        total_price=Decimal(total_price),
    )


def from_records(records: Iterable[Any]) -> List[Rental]:
    return [from_record(r) for r in records]
