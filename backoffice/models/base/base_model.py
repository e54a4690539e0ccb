"""
Base model configuration for SQLAlchemy ORM.

Provides abstract base classes with common functionality
for all database models including declarative base setup
and soft-delete support.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy.sql import func

# Create declarative base
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.

    Provides foundation for all database models with
    standard functionality and utilities.
    """

    __abstract__ = True

    # Primary key column - present in all models
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
        comment="Primary key (UUID)"
    )

    def __repr__(self) -> str:
        """String representation of model instance."""
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampModel(BaseModel):
    """
    Base model with automatic timestamp tracking.

    Includes created_at and updated_at fields with
    automatic management.
    """

    __abstract__ = True

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        comment="Record creation timestamp"
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        comment="Record last update timestamp"
    )


class SoftDeleteModel(TimestampModel):
    """
    Base model with soft delete capability.

    Rows are never hard-deleted; a non-null deleted_at marks
    the row as removed and every engine query filters it out.
    """

    __abstract__ = True

    deleted_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Deletion timestamp"
    )

    def soft_delete(self) -> "SoftDeleteModel":
        self.deleted_at = utcnow()
        return self
