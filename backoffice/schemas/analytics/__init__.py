from backoffice.schemas.analytics.monthly_metrics import (
    MetricDecimal,
    MetricsRefreshRequest,
    MetricsRefreshResponse,
    MonthlyMetricsRow,
)

__all__ = [
    "MetricDecimal",
    "MetricsRefreshRequest",
    "MetricsRefreshResponse",
    "MonthlyMetricsRow",
]
