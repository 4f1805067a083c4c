from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint
from sqlalchemy.sql import func
from database import Base

class InventoryItem(Base):
    __tablename__ = 'inventory_items'
    __table_args__ = (
        CheckConstraint('total_quantity >= 0', name='ck_inventory_items_total_quantity'),
        CheckConstraint('daily_rate >= 0', name='ck_inventory_items_daily_rate'),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    size = Column(String, nullable=True)
    daily_rate = Column(Numeric(15, 0), nullable=False, default=0)
    total_quantity = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
