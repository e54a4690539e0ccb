"""Derived analytics models."""

from backoffice.models.analytics.monthly_metrics import BusinessMonthlyMetrics

__all__ = ["BusinessMonthlyMetrics"]
