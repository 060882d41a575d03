from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator
import logging

from .config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db() -> None:
    """
    Create the users table if it does not exist yet.
    Called on application startup.
    """
    from .models import User  # noqa: F401  (registers the table with Base)

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized: %s", engine.url.render_as_string(hide_password=True))
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        raise


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
