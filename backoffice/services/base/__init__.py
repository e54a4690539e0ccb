"""
Service base layer: the BaseService class and ServiceResult types
shared by every service.
"""

from backoffice.services.base.base_service import BaseService
from backoffice.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
