"""
Base service class providing common functionality for all services.
"""

from typing import Optional, Dict, Any

from sqlalchemy.exc import SQLAlchemyError

from backoffice.core.exceptions import (
    AuthorizationError,
    BaseAppException,
    ConfigurationMissingError,
    DataFetchError,
    PersistenceError,
)
from backoffice.core.logging import get_logger
from backoffice.db.data_source import MetricsDataSource
from backoffice.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and data source
    - Consistent error handling via ServiceResult
    """

    def __init__(self, data_source: MetricsDataSource):
        """
        Initialize base service.

        Args:
            data_source: Capability used to open database sessions
        """
        self.data_source = data_source
        self._logger = get_logger(self.__class__.__module__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging

        Returns:
            ServiceResult with failure status and error details
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        error_code, severity = self._map_exception(exception)
        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=severity == ErrorSeverity.CRITICAL,
            extra=context,
        )

        details: Dict[str, Any] = {
            "error": str(exception),
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if isinstance(exception, BaseAppException):
            details["error_code"] = exception.error_code.value
            details.update(exception.details)

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=f"Failed to {operation}",
                details=details,
                severity=severity,
            )
        )

    def _map_exception(self, exception: Exception):
        """
        Map exception types to error codes and severities.

        Args:
            exception: The exception to map

        Returns:
            (ErrorCode, ErrorSeverity) pair
        """
        exception_mapping = [
            (ConfigurationMissingError, ErrorCode.MISSING_CONFIGURATION, ErrorSeverity.ERROR),
            (DataFetchError, ErrorCode.EXTERNAL_SERVICE_ERROR, ErrorSeverity.ERROR),
            (PersistenceError, ErrorCode.INTERNAL_ERROR, ErrorSeverity.CRITICAL),
            (AuthorizationError, ErrorCode.INSUFFICIENT_PERMISSIONS, ErrorSeverity.WARNING),
            (ValueError, ErrorCode.VALIDATION_ERROR, ErrorSeverity.WARNING),
            (SQLAlchemyError, ErrorCode.INTERNAL_ERROR, ErrorSeverity.CRITICAL),
        ]

        for exc_type, error_code, severity in exception_mapping:
            if isinstance(exception, exc_type):
                return error_code, severity

        return ErrorCode.INTERNAL_ERROR, ErrorSeverity.CRITICAL
