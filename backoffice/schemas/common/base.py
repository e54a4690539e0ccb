"""
Base schema class with the shared Pydantic configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = ["BaseSchema"]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    from_attributes lets ORM rows validate straight into response schemas.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )
