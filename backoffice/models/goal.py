"""
Monthly goal overrides. Every column is optional; a NULL means
"fall back to the business default".
"""

from sqlalchemy import JSON, CheckConstraint, Column, Index, Integer, Numeric, text

from backoffice.models.base import BusinessScopedMixin, SoftDeleteModel


class Goal(SoftDeleteModel, BusinessScopedMixin):
    """Goal row for one (business, year, month)."""

    __tablename__ = "goals"
    __table_args__ = (
        Index(
            "uq_goals_business_period_live",
            "business_id",
            "year",
            "month",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_goals_month"),
    )

    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)

    vat_percentage = Column(Numeric(precision=6, scale=4), nullable=True)
    markup_percentage = Column(Numeric(precision=6, scale=4), nullable=True)
    revenue_target = Column(Numeric(precision=14, scale=2), nullable=True)
    labor_cost_target_pct = Column(Numeric(precision=6, scale=2), nullable=True)
    food_cost_target_pct = Column(Numeric(precision=6, scale=2), nullable=True)
    operating_cost_target_pct = Column(Numeric(precision=6, scale=2), nullable=True)

    managed_product_targets = Column(
        JSON,
        nullable=True,
        comment="Managed product id -> target percentage for this month"
    )
