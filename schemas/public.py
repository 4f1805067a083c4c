from pydantic import BaseModel
from decimal import Decimal
from typing import Dict, List, Optional

class CatalogItem(BaseModel):
    id: int
    name: str
    size: Optional[str] = None
    daily_rate: Decimal
    image_url: Optional[str] = None
    total_quantity: int
    available: int
    is_available: bool

class Catalog(BaseModel):
    items: List[CatalogItem]
    site_config: Dict[str, str]
