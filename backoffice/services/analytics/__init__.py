"""
Monthly metrics engine: concurrent fetch, parameter resolution,
KPI formulas, comparisons and persistence.
"""

from backoffice.services.analytics.comparison import ComparisonEngine, PeriodComparison
from backoffice.services.analytics.goal_resolver import (
    CostCategory,
    GoalResolver,
    ResolvedValue,
    ValueSource,
)
from backoffice.services.analytics.kpi_calculator import (
    CostKpi,
    IncomeOriginTotals,
    KpiCalculator,
    ProductKpi,
    RevenueKpi,
)
from backoffice.services.analytics.labor_cost import LaborCostAllocator, LaborCostBreakdown
from backoffice.services.analytics.metrics_persister import MetricsPersister, MetricsSnapshot
from backoffice.services.analytics.monthly_metrics_service import MonthlyMetricsService
from backoffice.services.analytics.raw_data_fetcher import (
    ComparisonRawData,
    MonthlyRawData,
    RawDataFetcher,
)
from backoffice.services.analytics.work_schedule import WorkScheduleCalculator

__all__ = [
    "ComparisonEngine",
    "PeriodComparison",
    "CostCategory",
    "GoalResolver",
    "ResolvedValue",
    "ValueSource",
    "CostKpi",
    "IncomeOriginTotals",
    "KpiCalculator",
    "ProductKpi",
    "RevenueKpi",
    "LaborCostAllocator",
    "LaborCostBreakdown",
    "MetricsPersister",
    "MetricsSnapshot",
    "MonthlyMetricsService",
    "ComparisonRawData",
    "MonthlyRawData",
    "RawDataFetcher",
    "WorkScheduleCalculator",
]
