from pydantic import BaseModel, Field, condecimal, model_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from models.rental import RentalStatus
from schemas.customer import CustomerCreate
from schemas.inventory import Money

Percent = condecimal(ge=0, le=100, max_digits=5, decimal_places=2)

class LineItem(BaseModel):
    item_id: int
    quantity: int = Field(ge=1)

class RentalCreate(BaseModel):
    customer_id: Optional[int] = None
    new_customer: Optional[CustomerCreate] = None
    line_items: List[LineItem]
    rental_date: datetime
    due_date: datetime
    discount_percent: Optional[Percent] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_customer(self):
        if self.customer_id is None and self.new_customer is None:
            raise ValueError("Either customer_id or new_customer is required")
        return self

class RentalUpdate(BaseModel):
    customer_id: Optional[int] = None
    line_items: Optional[List[LineItem]] = None
    rental_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    discount_percent: Optional[Percent] = None
    notes: Optional[str] = None

class RentalReturn(BaseModel):
    surcharge: Money = Decimal(0)
    return_date: Optional[datetime] = None

class Rental(BaseModel):
    id: int
    customer_id: int
    customer_name: Optional[str] = None
    line_items: List[LineItem]
    rental_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    discount_percent: Optional[Decimal] = None
    surcharge: Optional[Decimal] = None
    total_price: Optional[Decimal] = None
    notes: Optional[str] = None
    status: RentalStatus
    is_overdue: bool = False
    estimated_price: Optional[Decimal] = None
