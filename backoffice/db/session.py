"""Database session management."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from backoffice.config.settings import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, applying pool sizing only where the dialect pools."""
    kwargs = {"pool_pre_ping": True, "echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_POOL_OVERFLOW
    return create_engine(database_url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


# Create database engine using the get_database_url method
engine = build_engine(settings.get_database_url(), echo=settings.DEBUG)

# Create SessionLocal class
SessionLocal = build_session_factory(engine)
