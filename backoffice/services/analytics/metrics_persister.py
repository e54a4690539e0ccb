"""
Metrics persister.

Quantizes a computed metrics snapshot and writes it as a full-row upsert
in one transaction. Rounding happens here and nowhere else.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from backoffice.core.exceptions import PersistenceError
from backoffice.core.logging import get_logger
from backoffice.db.data_source import MetricsDataSource
from backoffice.models import BusinessMonthlyMetrics
from backoffice.models.analytics.monthly_metrics import MANAGED_PRODUCT_COLUMNS
from backoffice.repositories.analytics import MonthlyMetricsRepository
from backoffice.schemas.analytics import MonthlyMetricsRow
from backoffice.services.analytics.comparison import PeriodComparison
from backoffice.services.analytics.kpi_calculator import (
    CostKpi,
    IncomeOriginTotals,
    ProductKpi,
    RevenueKpi,
)
from backoffice.services.analytics.labor_cost import LaborCostBreakdown
from backoffice.utils.date_utils import MonthPeriod, now_utc

logger = get_logger(__name__)

CENTS = Decimal("0.01")
RATE_PLACES = Decimal("0.0001")
PRODUCT_SLOTS = MANAGED_PRODUCT_COLUMNS


def quantize(value: Optional[Decimal], places: Decimal = CENTS) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value).quantize(places, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Unrounded results of one refresh, ready to persist."""

    business_id: str
    period: MonthPeriod
    actual_work_days: int
    actual_day_factors: Decimal
    expected_work_days: Decimal
    revenue: RevenueKpi
    labor: CostKpi
    food: CostKpi
    current_expenses: CostKpi
    products: List[ProductKpi]
    income_origin: IncomeOriginTotals
    previous_month: PeriodComparison
    previous_year: PeriodComparison
    vat_rate: Decimal
    markup: Decimal
    labor_breakdown: LaborCostBreakdown
    total_labor_hours: Decimal
    total_discounts: Decimal


def _cost_columns(prefix: str, amount_column: str, pct_column: str, kpi: CostKpi) -> Dict[str, Any]:
    return {
        amount_column: quantize(kpi.amount),
        pct_column: quantize(kpi.pct),
        f"{prefix}_target_pct": quantize(kpi.target_pct),
        f"{prefix}_diff_pct": quantize(kpi.diff_pct),
        f"{prefix}_diff_amount": quantize(kpi.diff_amount),
    }


def build_row_values(snapshot: MetricsSnapshot) -> Dict[str, Any]:
    """Map a snapshot onto business_monthly_metrics columns."""
    if len(snapshot.products) > PRODUCT_SLOTS:
        raise ValueError(
            f"{len(snapshot.products)} managed products exceed the {PRODUCT_SLOTS} row slots"
        )

    revenue = snapshot.revenue
    origin = snapshot.income_origin

    values: Dict[str, Any] = {
        "business_id": snapshot.business_id,
        "year": snapshot.period.year,
        "month": snapshot.period.month,
        "actual_work_days": snapshot.actual_work_days,
        "actual_day_factors": quantize(snapshot.actual_day_factors),
        "expected_work_days": quantize(snapshot.expected_work_days),
        "total_income": quantize(revenue.total_income),
        "income_before_vat": quantize(revenue.income_before_vat),
        "monthly_pace": quantize(revenue.monthly_pace),
        "daily_avg": quantize(revenue.daily_avg),
        "revenue_target": quantize(revenue.revenue_target),
        "target_diff_pct": quantize(revenue.target_diff_pct),
        "target_diff_amount": quantize(revenue.target_diff_amount),
    }
    values.update(_cost_columns("labor", "labor_cost_amount", "labor_cost_pct", snapshot.labor))
    values.update(_cost_columns("food", "food_cost_amount", "food_cost_pct", snapshot.food))
    values.update(_cost_columns(
        "current_expenses", "current_expenses_amount", "current_expenses_pct", snapshot.current_expenses
    ))

    for slot in range(1, PRODUCT_SLOTS + 1):
        prefix = f"managed_product_{slot}"
        product = snapshot.products[slot - 1] if slot <= len(snapshot.products) else None
        values[f"{prefix}_name"] = product.name if product else None
        values[f"{prefix}_cost"] = quantize(product.cost.amount) if product else None
        values[f"{prefix}_pct"] = quantize(product.cost.pct) if product else None
        values[f"{prefix}_target_pct"] = quantize(product.cost.target_pct) if product else None
        values[f"{prefix}_diff_pct"] = quantize(product.cost.diff_pct) if product else None

    values.update({
        "private_income": quantize(origin.private_income),
        "private_orders_count": origin.private_orders_count,
        "private_avg_ticket": quantize(origin.private_avg_ticket),
        "business_income": quantize(origin.business_income),
        "business_orders_count": origin.business_orders_count,
        "business_avg_ticket": quantize(origin.business_avg_ticket),
        "prev_month_income": quantize(snapshot.previous_month.income),
        "prev_month_pace": quantize(snapshot.previous_month.pace),
        "prev_month_change_pct": quantize(snapshot.previous_month.change_pct),
        "prev_year_income": quantize(snapshot.previous_year.income),
        "prev_year_pace": quantize(snapshot.previous_year.pace),
        "prev_year_change_pct": quantize(snapshot.previous_year.change_pct),
        "vat_pct": quantize(snapshot.vat_rate, RATE_PLACES),
        "markup_pct": quantize(snapshot.markup, RATE_PLACES),
        "manager_salary": quantize(snapshot.labor_breakdown.manager_salary),
        "manager_daily_cost": quantize(snapshot.labor_breakdown.manager_daily_cost),
        "total_labor_hours": quantize(snapshot.total_labor_hours),
        "total_discounts": quantize(snapshot.total_discounts),
        "computed_at": now_utc(),
    })
    return values


class MetricsPersister:
    """Writes monthly metrics rows through the data source."""

    def __init__(self, data_source: MetricsDataSource):
        self.data_source = data_source

    def persist(self, snapshot: MetricsSnapshot) -> MonthlyMetricsRow:
        """
        Upsert the snapshot and return the row exactly as written.

        Raises:
            PersistenceError: the write failed; nothing was committed
        """
        values = build_row_values(snapshot)
        try:
            with self.data_source.transaction() as db:
                MonthlyMetricsRepository(db).upsert(values)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to persist metrics for business {snapshot.business_id} {snapshot.period}: {str(e)}"
            )
            raise PersistenceError(
                f"Failed to persist metrics for {snapshot.period}",
                table=BusinessMonthlyMetrics.__tablename__,
            ) from e

        logger.info(f"Persisted metrics for business {snapshot.business_id} {snapshot.period}")
        return MonthlyMetricsRow.model_validate(values)
