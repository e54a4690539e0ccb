"""
Monthly metrics schemas.

MonthlyMetricsRow mirrors the business_monthly_metrics table: it is built
either from the values the persister just wrote or from a stored row.
Decimals serialize to JSON numbers.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field, PlainSerializer

from backoffice.schemas.common.base import BaseSchema

__all__ = [
    "MetricDecimal",
    "MetricsRefreshRequest",
    "MonthlyMetricsRow",
    "MetricsRefreshResponse",
]

MetricDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class MetricsRefreshRequest(BaseSchema):
    """Trigger a recomputation of one business month."""

    business_id: str = Field(..., min_length=1, description="Business identifier")
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)


class MonthlyMetricsRow(BaseSchema):
    """Persisted monthly KPI row."""

    business_id: str
    year: int
    month: int

    # Work days
    actual_work_days: Optional[int] = None
    actual_day_factors: Optional[MetricDecimal] = None
    expected_work_days: Optional[MetricDecimal] = None

    # Revenue
    total_income: Optional[MetricDecimal] = None
    income_before_vat: Optional[MetricDecimal] = None
    monthly_pace: Optional[MetricDecimal] = None
    daily_avg: Optional[MetricDecimal] = None
    revenue_target: Optional[MetricDecimal] = None
    target_diff_pct: Optional[MetricDecimal] = None
    target_diff_amount: Optional[MetricDecimal] = None

    # Labor
    labor_cost_amount: Optional[MetricDecimal] = None
    labor_cost_pct: Optional[MetricDecimal] = None
    labor_target_pct: Optional[MetricDecimal] = None
    labor_diff_pct: Optional[MetricDecimal] = None
    labor_diff_amount: Optional[MetricDecimal] = None

    # Food (goods purchases)
    food_cost_amount: Optional[MetricDecimal] = None
    food_cost_pct: Optional[MetricDecimal] = None
    food_target_pct: Optional[MetricDecimal] = None
    food_diff_pct: Optional[MetricDecimal] = None
    food_diff_amount: Optional[MetricDecimal] = None

    # Current expenses
    current_expenses_amount: Optional[MetricDecimal] = None
    current_expenses_pct: Optional[MetricDecimal] = None
    current_expenses_target_pct: Optional[MetricDecimal] = None
    current_expenses_diff_pct: Optional[MetricDecimal] = None
    current_expenses_diff_amount: Optional[MetricDecimal] = None

    # Managed products
    managed_product_1_name: Optional[str] = None
    managed_product_1_cost: Optional[MetricDecimal] = None
    managed_product_1_pct: Optional[MetricDecimal] = None
    managed_product_1_target_pct: Optional[MetricDecimal] = None
    managed_product_1_diff_pct: Optional[MetricDecimal] = None
    managed_product_2_name: Optional[str] = None
    managed_product_2_cost: Optional[MetricDecimal] = None
    managed_product_2_pct: Optional[MetricDecimal] = None
    managed_product_2_target_pct: Optional[MetricDecimal] = None
    managed_product_2_diff_pct: Optional[MetricDecimal] = None
    managed_product_3_name: Optional[str] = None
    managed_product_3_cost: Optional[MetricDecimal] = None
    managed_product_3_pct: Optional[MetricDecimal] = None
    managed_product_3_target_pct: Optional[MetricDecimal] = None
    managed_product_3_diff_pct: Optional[MetricDecimal] = None

    # Income origin
    private_income: Optional[MetricDecimal] = None
    private_orders_count: Optional[int] = None
    private_avg_ticket: Optional[MetricDecimal] = None
    business_income: Optional[MetricDecimal] = None
    business_orders_count: Optional[int] = None
    business_avg_ticket: Optional[MetricDecimal] = None

    # Comparisons
    prev_month_income: Optional[MetricDecimal] = None
    prev_month_pace: Optional[MetricDecimal] = None
    prev_month_change_pct: Optional[MetricDecimal] = None
    prev_year_income: Optional[MetricDecimal] = None
    prev_year_pace: Optional[MetricDecimal] = None
    prev_year_change_pct: Optional[MetricDecimal] = None

    # Parameters used
    vat_pct: Optional[MetricDecimal] = None
    markup_pct: Optional[MetricDecimal] = None
    manager_salary: Optional[MetricDecimal] = None
    manager_daily_cost: Optional[MetricDecimal] = None

    total_labor_hours: Optional[MetricDecimal] = None
    total_discounts: Optional[MetricDecimal] = None

    computed_at: datetime


class MetricsRefreshResponse(BaseSchema):
    success: bool = True
    metrics: MonthlyMetricsRow
