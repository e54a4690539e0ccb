"""
Database models.

Importing this package registers every table on the shared
declarative metadata.
"""

from backoffice.models.base import Base
from backoffice.models.business import Business, BusinessSchedule, BusinessMember, UserProfile
from backoffice.models.daily_entry import DailyEntry, IncomeSource, DailyIncomeBreakdown
from backoffice.models.invoice import ExpenseType, Supplier, Invoice
from backoffice.models.goal import Goal
from backoffice.models.managed_product import ManagedProduct, DailyProductUsage, consumed_quantity
from backoffice.models.analytics import BusinessMonthlyMetrics

__all__ = [
    "Base",
    "Business",
    "BusinessSchedule",
    "BusinessMember",
    "UserProfile",
    "DailyEntry",
    "IncomeSource",
    "DailyIncomeBreakdown",
    "ExpenseType",
    "Supplier",
    "Invoice",
    "Goal",
    "ManagedProduct",
    "DailyProductUsage",
    "consumed_quantity",
    "BusinessMonthlyMetrics",
]
