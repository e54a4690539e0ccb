from backoffice.services.auth.metrics_access_policy import MetricsAccessPolicy

__all__ = ["MetricsAccessPolicy"]
