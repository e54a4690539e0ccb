"""
Supplier and invoice models. An invoice's cost category is inherited
from its supplier's expense classification.
"""

from enum import Enum

from sqlalchemy import Column, Date, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from backoffice.models.base import BusinessScopedMixin, SoftDeleteModel


class ExpenseType(str, Enum):
    """Supplier expense classification."""
    GOODS_PURCHASES = "goods_purchases"
    CURRENT_EXPENSES = "current_expenses"
    EMPLOYEE_COSTS = "employee_costs"
    OTHER = "other"


class Supplier(SoftDeleteModel, BusinessScopedMixin):
    __tablename__ = "suppliers"

    name = Column(String(255), nullable=False)
    expense_type = Column(
        String(50),
        nullable=False,
        default=ExpenseType.CURRENT_EXPENSES.value,
        index=True,
    )

    invoices = relationship("Invoice", back_populates="supplier")


class Invoice(SoftDeleteModel, BusinessScopedMixin):
    __tablename__ = "invoices"

    supplier_id = Column(
        String(36),
        ForeignKey("suppliers.id"),
        nullable=False,
        index=True,
    )
    invoice_date = Column(Date, nullable=False, index=True)
    invoice_number = Column(String(100), nullable=True)
    subtotal = Column(
        Numeric(precision=14, scale=2),
        nullable=False,
        default=0,
        comment="Pre-tax amount"
    )

    supplier = relationship("Supplier", back_populates="invoices")
