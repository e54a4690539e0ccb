"""
Period-over-period revenue comparison.

A comparison month is projected to its own monthly pace with its own VAT
rate and its own calendar, then compared with the current pace.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from backoffice.repositories.analytics import BusinessDefaults
from backoffice.services.analytics.goal_resolver import GoalResolver
from backoffice.services.analytics.kpi_calculator import KpiCalculator
from backoffice.services.analytics.raw_data_fetcher import ComparisonRawData
from backoffice.services.analytics.work_schedule import WorkScheduleCalculator

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PeriodComparison:
    income: Decimal
    pace: Decimal
    change_pct: Decimal


class ComparisonEngine:

    def __init__(
        self,
        schedule_calculator: Optional[WorkScheduleCalculator] = None,
        kpi_calculator: Optional[KpiCalculator] = None,
    ):
        self.schedule_calculator = schedule_calculator or WorkScheduleCalculator()
        self.kpi_calculator = kpi_calculator or KpiCalculator()

    def pace(
        self,
        data: ComparisonRawData,
        defaults: BusinessDefaults,
        schedule: Mapping[int, Decimal],
    ) -> Decimal:
        """VAT-excluded monthly pace of a comparison month."""
        if data.daily.sum_day_factors <= 0:
            return ZERO

        vat_rate = GoalResolver(data.goal, defaults).vat_rate().value
        income_before_vat = self.kpi_calculator.income_before_vat(data.daily.total_income, vat_rate)
        expected = self.schedule_calculator.expected_work_days(schedule, data.period)
        return income_before_vat / data.daily.sum_day_factors * expected

    @staticmethod
    def change_pct(current_pace: Decimal, comparison_pace: Decimal) -> Decimal:
        """Percentage change; 0 when the comparison month has no pace."""
        if comparison_pace <= 0:
            return ZERO
        return (current_pace / comparison_pace - ONE) * HUNDRED

    def compare(
        self,
        current_pace: Decimal,
        data: ComparisonRawData,
        defaults: BusinessDefaults,
        schedule: Mapping[int, Decimal],
    ) -> PeriodComparison:
        pace = self.pace(data, defaults, schedule)
        return PeriodComparison(
            income=data.daily.total_income,
            pace=pace,
            change_pct=self.change_pct(current_pace, pace),
        )
