"""Database initialization utilities."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine

from backoffice.db.base import Base, import_models

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create every table that does not exist yet.

    Note: This is suitable for development/testing only.
    For production, use migrations instead.
    """
    if bind is None:
        from backoffice.db.session import engine as bind

    import_models()
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    if bind is None:
        from backoffice.db.session import engine as bind

    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")
