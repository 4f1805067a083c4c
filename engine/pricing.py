"""
Rental pricing.

The price of a rental is::

    gross    = sum(item daily rate * quantity) * days
    discount = gross * discount_percent / 100
    total    = round_half_up(gross - discount) + surcharge

Days are counted inclusively on calendar dates in the shop time zone, so a
rental returned the day it went out is billed one day. Daily rates are read
from the current inventory each time a price is computed; only the settled
``total_price`` is frozen.
"""
import dataclasses
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from engine.dates import as_aware, calendar_day_difference, round_half_up, utcnow
from engine.rentals import ActiveRental, LineItem, Rental, SettledRental, parse_line_items, validate_terms
from exceptions import InvalidStateError, ValidationError

ZERO = Decimal(0)
HUNDRED = Decimal(100)

_UNSET: Any = object()


@dataclass(frozen=True)
class PriceBreakdown:
    days: int
    daily_rate: Decimal
    gross_price: Decimal
    discount_amount: Decimal
    surcharge: Decimal
    total_price: Decimal


def rate_table(items: Iterable[Any]) -> Dict[int, Decimal]:
    return {item.id: Decimal(item.daily_rate) for item in items}


def daily_rate(line_items: Iterable[LineItem], rates: Dict[int, Decimal]) -> Decimal:
    # items missing from the catalog contribute nothing
    return sum((rates.get(line.item_id, ZERO) * line.quantity for line in line_items), ZERO)


def days_elapsed(rental_date: datetime, as_of: datetime, tz: Optional[tzinfo] = None) -> int:
    return max(1, calendar_day_difference(as_of, rental_date, tz) + 1)


def price_breakdown(
    line_items: Iterable[LineItem],
    rental_date: datetime,
    discount_percent: Optional[Decimal],
    rates: Dict[int, Decimal],
    as_of: datetime,
    surcharge: Decimal = ZERO,
    tz: Optional[tzinfo] = None,
) -> PriceBreakdown:
    days = days_elapsed(rental_date, as_of, tz)
    rate = daily_rate(line_items, rates)
    gross = rate * days
    discount_amount = gross * Decimal(discount_percent or 0) / HUNDRED
    surcharge = Decimal(surcharge)
    return PriceBreakdown(
        days=days,
        daily_rate=rate,
        gross_price=gross,
        discount_amount=discount_amount,
        surcharge=surcharge,
        total_price=round_half_up(gross - discount_amount) + surcharge,
    )


def estimate_live_price(
    rental: Rental,
    rates: Dict[int, Decimal],
    as_of: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Decimal:
    """What the rental would cost if it came back at ``as_of`` with no surcharge."""
    if not isinstance(rental, ActiveRental):
        raise InvalidStateError(f"Rental {rental.id} is already returned; its price is final")
    breakdown = price_breakdown(
        rental.line_items,
        rental.rental_date,
        rental.discount_percent,
        rates,
        as_of or utcnow(),
        tz=tz,
    )
    return breakdown.total_price


def settle_rental(
    rental: Rental,
    rates: Dict[int, Decimal],
    return_date: Optional[datetime] = None,
    surcharge: Decimal = ZERO,
    tz: Optional[tzinfo] = None,
) -> SettledRental:
    if not isinstance(rental, ActiveRental):
        raise InvalidStateError(f"Rental {rental.id} has already been returned")
    surcharge = Decimal(surcharge or 0)
    if surcharge < 0:
        raise ValidationError("Surcharge cannot be negative")
    if surcharge != surcharge.to_integral_value():
        raise ValidationError("Surcharge must be a whole amount")

    return_date = as_aware(return_date or utcnow())
    breakdown = price_breakdown(
        rental.line_items,
        rental.rental_date,
        rental.discount_percent,
        rates,
        return_date,
        surcharge=surcharge,
        tz=tz,
    )
    return SettledRental(
        id=rental.id,
        customer_id=rental.customer_id,
        line_items=rental.line_items,
        rental_date=rental.rental_date,
        due_date=rental.due_date,
        discount_percent=rental.discount_percent,
        notes=rental.notes,
        return_date=return_date,
        surcharge=surcharge,
        total_price=breakdown.total_price,
    )


def revise_rental(
    rental: Rental,
    line_items: Optional[Iterable[Any]] = None,
    rental_date: Optional[datetime] = None,
    due_date: Optional[datetime] = None,
    discount_percent: Optional[Decimal] = _UNSET,
    notes: Optional[str] = _UNSET,
    customer_id: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> ActiveRental:
    """Replace the terms of an open rental. Returned rentals cannot be revised."""
    if not isinstance(rental, ActiveRental):
        raise InvalidStateError(f"Rental {rental.id} has been returned and can no longer be edited")

    changes: Dict[str, Any] = {}
    if line_items is not None:
        changes["line_items"] = parse_line_items(line_items)
    if rental_date is not None:
        changes["rental_date"] = rental_date
    if due_date is not None:
        changes["due_date"] = due_date
    if discount_percent is not _UNSET:
        changes["discount_percent"] = Decimal(discount_percent) if discount_percent is not None else None
    if notes is not _UNSET:
        changes["notes"] = notes
    if customer_id is not None:
        changes["customer_id"] = customer_id

    revised = dataclasses.replace(rental, **changes)
    validate_terms(revised.line_items, revised.rental_date, revised.due_date, revised.discount_percent, tz)
    return revised


def is_overdue(rental: Rental, now: Optional[datetime] = None) -> bool:
    if not isinstance(rental, ActiveRental):
        return False
    return as_aware(now or utcnow()) > as_aware(rental.due_date)
