"""
Base models package.

Provides the declarative base, abstract base classes and mixins
shared by all database models.
"""

from backoffice.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    SoftDeleteModel,
    utcnow,
)

from backoffice.models.base.mixins import (
    BusinessScopedMixin,
    ActiveFlagMixin,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "SoftDeleteModel",
    "utcnow",
    "BusinessScopedMixin",
    "ActiveFlagMixin",
]
