"""
Monthly business metrics.

One derived row per (business, year, month). The row is written only
by the metrics persister as a full replace and is read-only to every
other component.
"""

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Integer, Numeric, String, UniqueConstraint
)

from backoffice.models.base import BaseModel, BusinessScopedMixin

# Number of managed_product_N_* column groups
MANAGED_PRODUCT_COLUMNS = 3


def _amount():
    return Column(Numeric(precision=16, scale=2), nullable=True)


def _pct():
    return Column(Numeric(precision=12, scale=2), nullable=True)


class BusinessMonthlyMetrics(BaseModel, BusinessScopedMixin):
    """Normalized monthly KPI row for one business."""

    __tablename__ = "business_monthly_metrics"
    __table_args__ = (
        UniqueConstraint("business_id", "year", "month", name="uq_business_monthly_metrics_period"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_business_monthly_metrics_month"),
    )

    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)

    # Work days
    actual_work_days = Column(Integer, nullable=True)
    actual_day_factors = _amount()
    expected_work_days = _amount()

    # Revenue
    total_income = _amount()
    income_before_vat = _amount()
    monthly_pace = _amount()
    daily_avg = _amount()
    revenue_target = _amount()
    target_diff_pct = _pct()
    target_diff_amount = _amount()

    # Labor
    labor_cost_amount = _amount()
    labor_cost_pct = _pct()
    labor_target_pct = _pct()
    labor_diff_pct = _pct()
    labor_diff_amount = _amount()

    # Food (goods purchases)
    food_cost_amount = _amount()
    food_cost_pct = _pct()
    food_target_pct = _pct()
    food_diff_pct = _pct()
    food_diff_amount = _amount()

    # Current expenses
    current_expenses_amount = _amount()
    current_expenses_pct = _pct()
    current_expenses_target_pct = _pct()
    current_expenses_diff_pct = _pct()
    current_expenses_diff_amount = _amount()

    # Managed products
    managed_product_1_name = Column(String(255), nullable=True)
    managed_product_1_cost = _amount()
    managed_product_1_pct = _pct()
    managed_product_1_target_pct = _pct()
    managed_product_1_diff_pct = _pct()
    managed_product_2_name = Column(String(255), nullable=True)
    managed_product_2_cost = _amount()
    managed_product_2_pct = _pct()
    managed_product_2_target_pct = _pct()
    managed_product_2_diff_pct = _pct()
    managed_product_3_name = Column(String(255), nullable=True)
    managed_product_3_cost = _amount()
    managed_product_3_pct = _pct()
    managed_product_3_target_pct = _pct()
    managed_product_3_diff_pct = _pct()

    # Income breakdown by origin
    private_income = _amount()
    private_orders_count = Column(Integer, nullable=True)
    private_avg_ticket = _amount()
    business_income = _amount()
    business_orders_count = Column(Integer, nullable=True)
    business_avg_ticket = _amount()

    # Comparisons
    prev_month_income = _amount()
    prev_month_pace = _amount()
    prev_month_change_pct = _pct()
    prev_year_income = _amount()
    prev_year_pace = _amount()
    prev_year_change_pct = _pct()

    # Parameters used
    vat_pct = Column(Numeric(precision=8, scale=4), nullable=True)
    markup_pct = Column(Numeric(precision=8, scale=4), nullable=True)
    manager_salary = _amount()
    manager_daily_cost = _amount()

    # Totals
    total_labor_hours = _amount()
    total_discounts = _amount()

    computed_at = Column(DateTime(timezone=True), nullable=False)
