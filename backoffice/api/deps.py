"""
FastAPI dependencies: data source, authenticated caller and services.

Override get_data_source in tests to point the whole request at a
fixture database.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backoffice.core.exceptions import AuthenticationError
from backoffice.core.logging import user_id
from backoffice.core.security import CurrentUser, user_from_token
from backoffice.db.data_source import MetricsDataSource
from backoffice.db.session import SessionLocal
from backoffice.services.analytics import MonthlyMetricsService
from backoffice.services.auth import MetricsAccessPolicy

# auto_error=False so a missing header surfaces as our 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)

_data_source = MetricsDataSource(SessionLocal)


def get_data_source() -> MetricsDataSource:
    return _data_source


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    Decode the bearer token into the calling user.

    Runs on the request task so the user id set for log records is
    visible to the endpoint.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    current_user = user_from_token(credentials.credentials)
    user_id.set(current_user.user_id)
    return current_user


def get_access_policy(
    data_source: MetricsDataSource = Depends(get_data_source),
) -> MetricsAccessPolicy:
    return MetricsAccessPolicy(data_source)


def get_metrics_service(
    data_source: MetricsDataSource = Depends(get_data_source),
) -> MonthlyMetricsService:
    return MonthlyMetricsService(data_source)


__all__ = [
    "get_data_source",
    "get_current_user",
    "get_access_policy",
    "get_metrics_service",
]
