from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from database import Base

class SiteConfigEntry(Base):
    __tablename__ = "site_config"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
