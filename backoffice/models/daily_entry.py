"""
Daily operational records: register totals, labor, discounts and the
per-income-source breakdown entered for each operating day.
"""

from sqlalchemy import (
    CheckConstraint, Column, Date, ForeignKey, Index, Integer, Numeric, String, text
)
from sqlalchemy.orm import relationship

from backoffice.models.base import (
    ActiveFlagMixin, BaseModel, BusinessScopedMixin, SoftDeleteModel
)

INCOME_TYPE_PRIVATE = "private"
INCOME_TYPE_BUSINESS = "business"


class DailyEntry(SoftDeleteModel, BusinessScopedMixin):
    """
    One operating day for a business.

    At most one live (non-deleted) entry exists per business and date.
    """

    __tablename__ = "daily_entries"
    __table_args__ = (
        Index(
            "uq_daily_entries_business_date_live",
            "business_id",
            "entry_date",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint("day_factor >= 0 AND day_factor <= 1", name="ck_daily_entries_day_factor"),
    )

    entry_date = Column(Date, nullable=False, index=True)
    total_register = Column(Numeric(precision=14, scale=2), nullable=False, default=0)
    labor_cost = Column(Numeric(precision=14, scale=2), nullable=False, default=0)
    labor_hours = Column(Numeric(precision=10, scale=2), nullable=False, default=0)
    discounts = Column(Numeric(precision=14, scale=2), nullable=False, default=0)
    day_factor = Column(
        Numeric(precision=4, scale=2),
        nullable=False,
        default=1,
        comment="Fraction of a full operating day (0-1)"
    )

    income_breakdown = relationship(
        "DailyIncomeBreakdown",
        back_populates="daily_entry",
        cascade="all, delete-orphan",
    )
    product_usage = relationship(
        "DailyProductUsage",
        back_populates="daily_entry",
        cascade="all, delete-orphan",
    )


class IncomeSource(SoftDeleteModel, BusinessScopedMixin, ActiveFlagMixin):
    """An income channel tagged as private or business origin."""

    __tablename__ = "income_sources"
    __table_args__ = (
        CheckConstraint(
            "income_type IN ('private', 'business')",
            name="ck_income_sources_income_type",
        ),
    )

    name = Column(String(255), nullable=False)
    income_type = Column(String(20), nullable=False, default=INCOME_TYPE_PRIVATE)


class DailyIncomeBreakdown(BaseModel):
    """Amount and order count for one income source on one day."""

    __tablename__ = "daily_income_breakdown"

    daily_entry_id = Column(
        String(36),
        ForeignKey("daily_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    income_source_id = Column(
        String(36),
        ForeignKey("income_sources.id"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(precision=14, scale=2), nullable=False, default=0)
    orders_count = Column(Integer, nullable=False, default=0)

    daily_entry = relationship("DailyEntry", back_populates="income_breakdown")
    income_source = relationship("IncomeSource")
