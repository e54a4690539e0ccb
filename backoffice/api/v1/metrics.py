"""
Monthly metrics endpoints.
"""

from fastapi import APIRouter, Depends, Path, status

from backoffice.api import deps
from backoffice.core.exceptions import ServiceFailureError
from backoffice.core.security import CurrentUser
from backoffice.schemas.analytics import (
    MetricsRefreshRequest,
    MetricsRefreshResponse,
    MonthlyMetricsRow,
)
from backoffice.services.analytics import MonthlyMetricsService
from backoffice.services.auth import MetricsAccessPolicy
from backoffice.services.base import ErrorCode, ServiceResult

router = APIRouter(prefix="/metrics", tags=["Monthly Metrics"])

# ServiceResult error code -> HTTP status
_STATUS_BY_ERROR_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.MISSING_CONFIGURATION: status.HTTP_404_NOT_FOUND,
    ErrorCode.INSUFFICIENT_PERMISSIONS: status.HTTP_403_FORBIDDEN,
    ErrorCode.EXTERNAL_SERVICE_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _unwrap(result: ServiceResult):
    if result.is_success:
        return result.data

    error = result.error
    details = dict(error.details or {})
    details["severity"] = error.severity.value
    if error.field:
        details["field"] = error.field
    raise ServiceFailureError(
        error.message,
        error_code=error.code,
        status_code=_STATUS_BY_ERROR_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        details=details,
    )


@router.post(
    "/refresh",
    response_model=MetricsRefreshResponse,
    summary="Recompute the metrics row for one business month",
)
def refresh_metrics(
    payload: MetricsRefreshRequest,
    current_user: CurrentUser = Depends(deps.get_current_user),
    policy: MetricsAccessPolicy = Depends(deps.get_access_policy),
    service: MonthlyMetricsService = Depends(deps.get_metrics_service),
) -> MetricsRefreshResponse:
    policy.ensure_can_refresh(current_user.user_id, payload.business_id)

    row = _unwrap(service.refresh_metrics(payload.business_id, payload.year, payload.month))
    return MetricsRefreshResponse(success=True, metrics=row)


@router.get(
    "/{business_id}/{year}/{month}",
    response_model=MonthlyMetricsRow,
    summary="Read the stored metrics row for one business month",
)
def get_metrics(
    business_id: str,
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
    current_user: CurrentUser = Depends(deps.get_current_user),
    policy: MetricsAccessPolicy = Depends(deps.get_access_policy),
    service: MonthlyMetricsService = Depends(deps.get_metrics_service),
) -> MonthlyMetricsRow:
    policy.ensure_can_refresh(current_user.user_id, business_id)
    return _unwrap(service.get_metrics(business_id, year, month))
