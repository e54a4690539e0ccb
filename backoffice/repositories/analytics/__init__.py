"""Analytics repositories: metrics source aggregations and the metrics row store."""

from backoffice.repositories.analytics.metrics_source_repository import (
    BusinessDefaults,
    DailyTotals,
    GoalSnapshot,
    IncomeSourceTotal,
    InvoiceTotals,
    MetricsSourceRepository,
    ProductUsageTotal,
)
from backoffice.repositories.analytics.monthly_metrics_repository import MonthlyMetricsRepository

__all__ = [
    "BusinessDefaults",
    "DailyTotals",
    "GoalSnapshot",
    "IncomeSourceTotal",
    "InvoiceTotals",
    "MetricsSourceRepository",
    "ProductUsageTotal",
    "MonthlyMetricsRepository",
]
