from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

WHOLE_UNIT = Decimal("1")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Naive datetimes coming back from the store are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    return as_aware(value).astimezone(tz or timezone.utc).date()


def calendar_day_difference(later: datetime, earlier: datetime, tz: Optional[tzinfo] = None) -> int:
    """Number of calendar-day boundaries between two instants, seen from ``tz``."""
    return (local_date(later, tz) - local_date(earlier, tz)).days


def round_half_up(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return as_aware(value).astimezone(timezone.utc)
