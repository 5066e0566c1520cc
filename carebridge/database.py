# carebridge/database.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from .config import get_settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    options = {"pool_pre_ping": True, "echo": False}
    if database_url.startswith("sqlite://"):
        options["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite lives inside a single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
    return options


# Create engine
engine = create_engine(
    get_settings().database_url,
    **_engine_options(get_settings().database_url)
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Dependency to get database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """Create all database tables - models must be imported first."""
    from . import models  # registers every table on Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

def drop_tables():
    """Drop all database tables"""
    from . import models

    Base.metadata.drop_all(bind=engine)
    logger.info("Database tables dropped")
