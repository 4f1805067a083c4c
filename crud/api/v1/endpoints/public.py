from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from schemas.public import Catalog
from crud import inventory, site_config

router = APIRouter()

@router.get("/catalog", response_model=Catalog)
def get_catalog(db: Session = Depends(get_db)):
    """Storefront view: every item with how many units are free, plus the banner and contact settings."""
    items = inventory.describe_inventory(db)
    return {"items": items, "site_config": site_config.get_site_config(db)}
