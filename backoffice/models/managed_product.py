"""
Managed (inventory-tracked) products and their daily usage.

Usage rows carry the unit cost that was in force when the usage was
recorded, so historical reports do not drift when the product's live
unit cost changes.
"""

from decimal import Decimal

from sqlalchemy import Column, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship, validates

from backoffice.models.base import (
    ActiveFlagMixin, BaseModel, BusinessScopedMixin, SoftDeleteModel
)


def consumed_quantity(opening_stock, received_quantity, closing_stock) -> Decimal:
    """Consumption for a day: opening + received - closing."""
    return (
        Decimal(str(opening_stock or 0))
        + Decimal(str(received_quantity or 0))
        - Decimal(str(closing_stock or 0))
    )


class ManagedProduct(SoftDeleteModel, BusinessScopedMixin, ActiveFlagMixin):
    __tablename__ = "managed_products"

    name = Column(String(255), nullable=False)
    unit = Column(String(20), nullable=True)
    unit_cost = Column(
        Numeric(precision=12, scale=4),
        nullable=False,
        default=0,
        comment="Current unit cost; usage rows stamp their own copy"
    )
    target_pct = Column(
        Numeric(precision=6, scale=2),
        nullable=True,
        comment="Default target cost percentage"
    )


class DailyProductUsage(BaseModel):
    """Consumption of one managed product on one daily entry."""

    __tablename__ = "daily_product_usage"
    __table_args__ = (
        UniqueConstraint("daily_entry_id", "product_id", name="uq_daily_product_usage"),
    )

    daily_entry_id = Column(
        String(36),
        ForeignKey("daily_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        String(36),
        ForeignKey("managed_products.id"),
        nullable=False,
        index=True,
    )
    opening_stock = Column(Numeric(precision=12, scale=3), nullable=False, default=0)
    received_quantity = Column(Numeric(precision=12, scale=3), nullable=False, default=0)
    closing_stock = Column(Numeric(precision=12, scale=3), nullable=False, default=0)
    quantity = Column(
        Numeric(precision=12, scale=3),
        nullable=False,
        default=0,
        comment="Consumed quantity (opening + received - closing)"
    )
    unit_cost = Column(
        Numeric(precision=12, scale=4),
        nullable=False,
        default=0,
        comment="Unit cost at time of use"
    )

    daily_entry = relationship("DailyEntry", back_populates="product_usage")
    product = relationship("ManagedProduct")

    @classmethod
    def record(cls, daily_entry_id: str, product: ManagedProduct, opening_stock,
               received_quantity, closing_stock) -> "DailyProductUsage":
        """Build a usage row, deriving consumption and stamping today's unit cost."""
        return cls(
            daily_entry_id=daily_entry_id,
            product_id=product.id,
            opening_stock=opening_stock,
            received_quantity=received_quantity,
            closing_stock=closing_stock,
            quantity=consumed_quantity(opening_stock, received_quantity, closing_stock),
            unit_cost=product.unit_cost,
        )

    @validates("quantity")
    def _validate_quantity(self, key, value):
        if value is not None and Decimal(str(value)) < 0:
            raise ValueError("Consumed quantity cannot be negative")
        return value
