"""
SQLAlchemy model mixins for reusable functionality.
"""

from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import declared_attr


class BusinessScopedMixin:
    """
    Mixin for rows owned by a single business.

    Provides an indexed business_id foreign key used by every
    engine query to scope reads.
    """

    @declared_attr
    def business_id(cls):
        return Column(
            String(36),
            ForeignKey("businesses.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
            comment="Owning business"
        )


class ActiveFlagMixin:
    """Mixin for catalog rows that can be switched off without deletion."""

    @declared_attr
    def is_active(cls):
        return Column(Boolean, nullable=False, default=True, index=True)
