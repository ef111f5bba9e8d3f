import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from app.core.config import settings, ensure_data_dir
from app.db.base import Base

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db() -> None:
    """Create the settings table if it does not exist yet."""
    import app.models  # noqa: F401  registers mappers on Base.metadata

    ensure_data_dir()
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialised at %s", settings.DATABASE_URL)
