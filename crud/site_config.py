import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Dict, Iterable, Optional
from models.site_config import SiteConfigEntry
from schemas.site_config import SiteConfigEntry as SiteConfigEntryIn

logger = logging.getLogger(__name__)

DEFAULT_SITE_CONFIG: Dict[str, str] = {
    "hero_title": "Bộ Sưu Tập Thời Trang Cho Thuê",
    "hero_subtitle": (
        "Khám phá những bộ trang phục tuyệt đẹp cho mọi dịp đặc biệt. "
        "Phong cách, tiện lợi và đẳng cấp."
    ),
    "hero_image_url": "https://images.unsplash.com/photo-1556905055-8f358a7a47b2?q=80&w=2070&auto=format&fit=crop",
    "contact_zalo_phone": "0975475789",
    "contact_zalo_name": "Cộng Studio",
    "contact_hotline_phone": "0975475789",
    "contact_zalo_icon_url": "",
    "contact_hotline_icon_url": "",
}


def get_site_config(db: Optional[Session]) -> Dict[str, str]:
    config = dict(DEFAULT_SITE_CONFIG)
    if db is None:
        return config

    try:
        entries = db.query(SiteConfigEntry).all()
    except SQLAlchemyError as e:
        # a missing table or unreachable store falls back to the defaults
        db.rollback()
        logger.warning("Site config unavailable, using defaults: %s", e)
        return config

    for entry in entries:
        # an empty stored value means "use the default"
        if entry.value:
            config[entry.key] = entry.value
    return config

def update_site_config(db: Session, entries: Iterable[SiteConfigEntryIn]) -> Dict[str, str]:
    try:
        for entry in entries:
            db.merge(SiteConfigEntry(key=entry.key, value=entry.value))
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_site_config(db)
