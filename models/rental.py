from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from database import Base

class RentalStatus(PyEnum):
    ACTIVE = "active"
    SETTLED = "settled"
    OVERDUE = "overdue"

class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)
    # [{"item_id": 1, "quantity": 2}, ...]
    line_items = Column(JSON, nullable=False, default=list)
    rental_date = Column(DateTime(timezone=True), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    return_date = Column(DateTime(timezone=True), nullable=True)
    discount_percent = Column(Numeric(5, 2), nullable=True)
    surcharge = Column(Numeric(15, 0), nullable=True)
    total_price = Column(Numeric(15, 0), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="rentals")
