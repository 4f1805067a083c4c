from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class CustomerBase(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1, max_length=20)
    address: str = Field(min_length=1)

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    address: Optional[str] = Field(None, min_length=1)

class Customer(CustomerBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
