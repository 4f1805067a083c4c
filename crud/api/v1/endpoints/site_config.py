from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from auth import AuthContext, require_admin
from database import get_db, get_optional_db
from schemas.site_config import SiteConfigEntry
from crud import site_config

router = APIRouter()

@router.get("/", response_model=Dict[str, str])
def get_site_config(db: Optional[Session] = Depends(get_optional_db)):
    return site_config.get_site_config(db)

@router.put("/", response_model=Dict[str, str])
def update_site_config(entries: List[SiteConfigEntry], db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    return site_config.update_site_config(db, entries)
