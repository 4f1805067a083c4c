from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

class DashboardStats(BaseModel):
    item_kinds: int
    total_stock: int
    active_rentals: int
    overdue_rentals: int

class PopularItem(BaseModel):
    id: int
    name: str
    size: Optional[str] = None
    reserved: int

class TopCustomer(BaseModel):
    id: int
    name: str
    total_spent: Decimal

class RevenuePoint(BaseModel):
    name: str
    full_name: str
    revenue: Decimal

class OverdueRental(BaseModel):
    id: int
    customer_id: int
    customer_name: str
    due_date: datetime
    days_overdue: int

class DashboardOverview(BaseModel):
    stats: DashboardStats
    most_popular_items: List[PopularItem]
    top_customers: List[TopCustomer]
    overdue_rentals: List[OverdueRental]
