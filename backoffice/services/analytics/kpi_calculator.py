"""
KPI calculator.

Pure Decimal formulas for revenue, cost categories, managed products and
the income-origin breakdown. Nothing is rounded here; quantization happens
only when the row is persisted.

Degenerate denominators never raise:
- income_before_vat is 0 when 1 + vat <= 0
- daily_avg is 0 when no weighted days were recorded
- cost percentages are 0 when income_before_vat <= 0
- target diffs are None when no target (target <= 0) is set
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from backoffice.models.daily_entry import INCOME_TYPE_BUSINESS
from backoffice.repositories.analytics import IncomeSourceTotal
from backoffice.services.analytics.goal_resolver import ResolvedValue, has_target

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class RevenueKpi:
    total_income: Decimal
    income_before_vat: Decimal
    daily_avg: Decimal
    monthly_pace: Decimal
    revenue_target: Decimal
    target_diff_pct: Optional[Decimal]
    target_diff_amount: Optional[Decimal]


@dataclass(frozen=True)
class CostKpi:
    amount: Decimal
    pct: Decimal
    target_pct: Decimal
    diff_pct: Optional[Decimal]
    diff_amount: Optional[Decimal]


@dataclass(frozen=True)
class ProductKpi:
    name: str
    cost: CostKpi


@dataclass(frozen=True)
class IncomeOriginTotals:
    private_income: Decimal = ZERO
    private_orders_count: int = 0
    private_avg_ticket: Decimal = ZERO
    business_income: Decimal = ZERO
    business_orders_count: int = 0
    business_avg_ticket: Decimal = ZERO


def _avg_ticket(amount: Decimal, orders: int) -> Decimal:
    return amount / orders if orders > 0 else ZERO


class KpiCalculator:

    @staticmethod
    def income_before_vat(gross: Decimal, vat_rate: Decimal) -> Decimal:
        divisor = ONE + vat_rate
        if divisor <= 0:
            return ZERO
        return gross / divisor

    @staticmethod
    def cost_pct(amount: Decimal, income_before_vat: Decimal) -> Decimal:
        if income_before_vat <= 0:
            return ZERO
        return amount / income_before_vat * HUNDRED

    def revenue(
        self,
        gross: Decimal,
        vat_rate: Decimal,
        actual_day_weight_sum: Decimal,
        expected_work_days: Decimal,
        target: ResolvedValue,
    ) -> RevenueKpi:
        income_before_vat = self.income_before_vat(gross, vat_rate)
        if actual_day_weight_sum > 0:
            daily_avg = income_before_vat / actual_day_weight_sum
        else:
            daily_avg = ZERO
        monthly_pace = daily_avg * expected_work_days

        diff_pct = None
        diff_amount = None
        if has_target(target):
            diff_pct = (monthly_pace / target.value - ONE) * HUNDRED
            if expected_work_days > 0:
                diff_amount = (monthly_pace - target.value) / expected_work_days * actual_day_weight_sum
            else:
                diff_amount = ZERO

        return RevenueKpi(
            total_income=gross,
            income_before_vat=income_before_vat,
            daily_avg=daily_avg,
            monthly_pace=monthly_pace,
            revenue_target=target.value,
            target_diff_pct=diff_pct,
            target_diff_amount=diff_amount,
        )

    def cost(self, amount: Decimal, income_before_vat: Decimal, target: ResolvedValue) -> CostKpi:
        """Percentage of VAT-excluded income and its distance from target."""
        pct = self.cost_pct(amount, income_before_vat)

        diff_pct = None
        diff_amount = None
        if has_target(target):
            diff_pct = pct - target.value
            diff_amount = diff_pct * income_before_vat / HUNDRED

        return CostKpi(
            amount=amount,
            pct=pct,
            target_pct=target.value,
            diff_pct=diff_pct,
            diff_amount=diff_amount,
        )

    def income_breakdown(self, sources: Iterable[IncomeSourceTotal]) -> IncomeOriginTotals:
        """
        Totals and order-weighted average ticket per origin tag.

        Sources with no known type are counted as private.
        """
        private_income, private_orders = ZERO, 0
        business_income, business_orders = ZERO, 0

        for source in sources:
            if source.income_type == INCOME_TYPE_BUSINESS:
                business_income += source.amount
                business_orders += source.orders_count
            else:
                private_income += source.amount
                private_orders += source.orders_count

        return IncomeOriginTotals(
            private_income=private_income,
            private_orders_count=private_orders,
            private_avg_ticket=_avg_ticket(private_income, private_orders),
            business_income=business_income,
            business_orders_count=business_orders,
            business_avg_ticket=_avg_ticket(business_income, business_orders),
        )
