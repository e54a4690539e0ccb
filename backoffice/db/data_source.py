"""
Data source capability for the metrics engine.

The engine reads upstream tables with elevated (cross-tenant) access.
That access is modelled as an explicit object handed to the fetcher and
persister instead of a module-level global, so callers and tests decide
which database the engine talks to.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker


class MetricsDataSource:
    """Opens independent sessions against the metrics database."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a fresh session; one per concurrent read."""
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session whose work commits on success and rolls back on error."""
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
