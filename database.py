import logging
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, declarative_base
from config import settings
from exceptions import BackingStoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()

engine = None
SessionLocal = None

DATABASE_URL = settings.database_url
if DATABASE_URL:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
else:
    logger.warning("Database is not configured; set DATABASE_URL or POSTGRES_HOST")


def create_tables():
    if engine is None:
        return False
    try:
        Base.metadata.create_all(bind=engine)
    except OperationalError as e:
        logger.error("database not connected: %s", e)
        return False
    logger.info("database connected")
    return True


def get_db():
    if SessionLocal is None:
        raise BackingStoreUnavailable(
            "The database is not configured. Set DATABASE_URL in the environment or .env file."
        )
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_db():
    """Like get_db, but yields None when no database is configured."""
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
