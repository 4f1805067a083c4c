import logging
from datetime import datetime
from decimal import Decimal
from io import BytesIO
from typing import Dict, List, Optional

import openpyxl
import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from config import settings
from engine.availability import compute_active_reservations, most_reserved_items, reserved_count
from engine.dates import calendar_day_difference, local_date, utcnow
from engine.pricing import is_overdue
from engine.rentals import ActiveRental, SettledRental, from_record, from_records
from models.customer import Customer
from models.inventory import InventoryItem
from models.rental import Rental

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Khách hàng không xác định"

# view -> (pandas period frequency, number of buckets)
REVENUE_VIEWS = {
    "week": ("W-SUN", 12),
    "month": ("M", 12),
    "year": ("Y", 5),
}


def get_dashboard_data(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    items = db.query(InventoryItem).all()
    customers = {c.id: c.name for c in db.query(Customer).all()}
    rentals = from_records(db.query(Rental).order_by(Rental.rental_date.desc()).all())

    reservations = compute_active_reservations(rentals)
    active = [r for r in rentals if isinstance(r, ActiveRental)]
    overdue = [r for r in active if is_overdue(r, now)]

    return {
        "stats": {
            "item_kinds": len(items),
            "total_stock": sum(item.total_quantity for item in items),
            "active_rentals": len(active),
            "overdue_rentals": len(overdue),
        },
        "most_popular_items": [
            {
                "id": item.id,
                "name": item.name,
                "size": item.size,
                "reserved": reserved_count(item, reservations),
            }
            for item in most_reserved_items(items, reservations)
        ],
        "top_customers": top_spending_customers(rentals, customers, now),
        "overdue_rentals": [
            {
                "id": r.id,
                "customer_id": r.customer_id,
                "customer_name": customers.get(r.customer_id, UNKNOWN_CUSTOMER),
                "due_date": r.due_date,
                "days_overdue": calendar_day_difference(now, r.due_date, settings.shop_tz),
            }
            for r in sorted(overdue, key=lambda r: r.due_date)[:5]
        ],
    }

def top_spending_customers(rentals, customers: Dict[int, str], now: datetime, limit: int = 5) -> List[dict]:
    """Customers ranked by what their returned rentals cost this calendar year."""
    year = local_date(now, settings.shop_tz).year
    spending: Dict[int, Decimal] = {}
    for rental in rentals:
        if not isinstance(rental, SettledRental) or not rental.total_price:
            continue
        if local_date(rental.rental_date, settings.shop_tz).year != year:
            continue
        spending[rental.customer_id] = spending.get(rental.customer_id, Decimal(0)) + rental.total_price

    ranked = sorted(spending.items(), key=lambda entry: entry[1], reverse=True)[:limit]
    return [
        {"id": customer_id, "name": customers.get(customer_id, UNKNOWN_CUSTOMER), "total_spent": total}
        for customer_id, total in ranked
    ]

def _bucket_labels(period: pd.Period, view: str) -> Dict[str, str]:
    if view == "week":
        start = period.start_time
        week = start.isocalendar()[1]
        return {"name": f"T{week}", "full_name": f"Tuần {week}, {start.year}"}
    if view == "month":
        return {"name": f"{period.month}/{period.year % 100:02d}", "full_name": f"Tháng {period.month} {period.year}"}
    return {"name": str(period.year), "full_name": f"Năm {period.year}"}

def get_revenue_series(db: Session, view: str = "month", now: Optional[datetime] = None) -> List[dict]:
    """
    Revenue of returned rentals, bucketed by the date they went out.

    The series always covers the trailing window for ``view`` (12 weeks,
    12 months or 5 years ending at ``now``), with empty buckets at zero.
    """
    freq, periods = REVENUE_VIEWS[view]
    now = now or utcnow()
    tz = settings.shop_tz

    rows = [
        {"day": local_date(r.rental_date, tz), "revenue": int(r.total_price)}
        for r in from_records(db.query(Rental).all())
        if isinstance(r, SettledRental) and r.total_price
    ]

    window = pd.period_range(end=pd.Period(pd.Timestamp(local_date(now, tz)), freq=freq), periods=periods, freq=freq)
    if rows:
        df = pd.DataFrame(rows)
        df["period"] = pd.to_datetime(df["day"]).dt.to_period(freq)
        totals = df.groupby("period")["revenue"].sum().reindex(window, fill_value=0)
    else:
        totals = pd.Series(0, index=window)

    logger.debug("Revenue series %s: %d settled rentals", view, len(rows))
    return [
        {**_bucket_labels(period, view), "revenue": Decimal(int(amount))}
        for period, amount in totals.items()
    ]

def generate_rentals_excel(db: Session) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Rentals"

    header_font = Font(name='Arial', size=11, bold=True)
    normal_font = Font(name='Arial', size=10)
    header_fill = PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid')
    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    tz = settings.shop_tz
    items = {item.id: item.name for item in db.query(InventoryItem).all()}
    customers = {c.id: c.name for c in db.query(Customer).all()}

    headers = [
        "ID", "Customer", "Items", "Rental date", "Due date",
        "Return date", "Discount (%)", "Surcharge", "Total", "Status",
    ]
    for col, title in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=title)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border
        cell.alignment = Alignment(horizontal='center')

    records = db.query(Rental).order_by(Rental.rental_date.desc()).all()
    for row, record in enumerate(records, start=2):
        rental = from_record(record)
        settled = isinstance(rental, SettledRental)
        values = [
            rental.id,
            customers.get(rental.customer_id, UNKNOWN_CUSTOMER),
            ", ".join(f"{items.get(line.item_id, 'N/A')} (x{line.quantity})" for line in rental.line_items),
            local_date(rental.rental_date, tz).strftime("%d/%m/%Y"),
            local_date(rental.due_date, tz).strftime("%d/%m/%Y"),
            local_date(rental.return_date, tz).strftime("%d/%m/%Y") if settled else "",
            float(rental.discount_percent or 0),
            int(rental.surcharge) if settled else 0,
            int(rental.total_price) if settled else None,
            "settled" if settled else "active",
        ]
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = normal_font
            cell.border = border
        for col in (8, 9):
            ws.cell(row=row, column=col).number_format = '#,##0'

    for col in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 18
    ws.column_dimensions['C'].width = 40

    output = BytesIO()
    wb.save(output)
    return output.getvalue()
