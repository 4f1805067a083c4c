from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Set

from engine.rentals import ActiveRental, Rental


def compute_active_reservations(rentals: Iterable[Rental]) -> Dict[int, int]:
    """Units of each item held by rentals that have not been returned yet."""
    reserved: Dict[int, int] = defaultdict(int)
    for rental in rentals:
        if not isinstance(rental, ActiveRental):
            continue
        for line in rental.line_items:
            reserved[line.item_id] += line.quantity
    return dict(reserved)


def reserved_count(item: Any, reservations: Dict[int, int]) -> int:
    return reservations.get(item.id, 0)


def available_count(item: Any, reservations: Dict[int, int]) -> int:
    # negative when the data is over-committed; treat <= 0 as unavailable
    return item.total_quantity - reserved_count(item, reservations)


def is_available(item: Any, reservations: Dict[int, int]) -> bool:
    return available_count(item, reservations) > 0


def items_with_history(rentals: Iterable[Rental]) -> Set[int]:
    """Item ids cited by any rental, returned or not."""
    return {line.item_id for rental in rentals for line in rental.line_items}


def max_selectable_quantity(
    item: Any,
    reservations: Dict[int, int],
    editing: Optional[ActiveRental] = None,
) -> int:
    """
    How many units of ``item`` a single rental may hold.

    When ``editing`` is an active rental being revised, the units it already
    holds are handed back before the limit is computed, so a rental can keep
    what it has even when nothing else is free.
    """
    held_by_others = reserved_count(item, reservations)
    if editing is not None:
        held_by_others -= sum(
            line.quantity for line in editing.line_items if line.item_id == item.id
        )
    return item.total_quantity - held_by_others


def most_reserved_items(items: Iterable[Any], reservations: Dict[int, int], limit: int = 5) -> List[Any]:
    ranked = sorted(items, key=lambda item: reserved_count(item, reservations), reverse=True)
    return [item for item in ranked[:limit] if reserved_count(item, reservations) > 0]
