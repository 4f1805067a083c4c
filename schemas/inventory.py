from pydantic import BaseModel, Field, condecimal
from typing import Optional
from datetime import datetime

Money = condecimal(ge=0, max_digits=15, decimal_places=0)

class InventoryItemBase(BaseModel):
    name: str = Field(min_length=1)
    size: Optional[str] = None
    daily_rate: Money
    total_quantity: int = Field(ge=0)
    image_url: Optional[str] = None

class InventoryItemCreate(InventoryItemBase):
    pass

class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    size: Optional[str] = None
    daily_rate: Optional[Money] = None
    total_quantity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None

class InventoryItem(InventoryItemBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class InventoryItemWithAvailability(InventoryItem):
    reserved: int
    available: int
    is_available: bool
    has_history: bool
