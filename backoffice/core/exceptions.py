"""
Custom Exceptions for the Back-Office Metrics Service

This module defines the exception classes raised by repositories and
the metrics engine and rendered by the API layer.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    TOKEN_INVALID = "TOKEN_INVALID"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DATA_FETCH_FAILED = "DATA_FETCH_FAILED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    MISSING_CONFIGURATION = "MISSING_CONFIGURATION"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ServiceFailureError(BaseAppException):
    """
    A failed service result surfaced through the API.

    Carries the service-layer error code so HTTP clients see the same
    code the service reported.
    """

    def __init__(
        self,
        message: str,
        error_code: Enum,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details, status_code)


class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 401)


class InvalidTokenError(AuthenticationError):
    """Exception raised when a bearer token cannot be decoded"""

    def __init__(self, message: str = "Invalid token", reason: Optional[str] = None):
        details = {"reason": reason} if reason else {}
        super().__init__(message, ErrorCode.TOKEN_INVALID, details)


class AuthorizationError(BaseAppException):
    """Exception raised when authorization fails"""

    def __init__(
        self,
        message: str = "Access denied",
        required_permission: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.AUTHORIZATION_FAILED
    ):
        details = {"required_permission": required_permission} if required_permission else {}
        super().__init__(message, error_code, details, 403)


# ========================================
# Metrics Engine Exceptions
# ========================================

class ConfigurationError(BaseAppException):
    """Exception raised when configuration is invalid"""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        status_code: int = 500
    ):
        details = {"config_key": config_key}
        super().__init__(message, error_code, details, status_code)


class ConfigurationMissingError(ConfigurationError):
    """
    Raised when a business has no defaults row.

    Every downstream formula needs a VAT and markup source, so the
    computation cannot proceed.
    """

    def __init__(self, business_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"Business defaults not found (ID: {business_id})",
            config_key="business_defaults",
            error_code=ErrorCode.MISSING_CONFIGURATION,
            status_code=404,
        )
        self.details["business_id"] = business_id


class DataFetchError(BaseAppException):
    """Exception raised when a required upstream read fails"""

    def __init__(
        self,
        message: str = "Failed to read upstream data",
        source: Optional[str] = None,
        failed_sources: Optional[List[str]] = None,
    ):
        details = {"source": source, "failed_sources": failed_sources or []}
        super().__init__(message, ErrorCode.DATA_FETCH_FAILED, details, 502)


class PersistenceError(BaseAppException):
    """Exception raised when the metrics row cannot be written"""

    def __init__(
        self,
        message: str = "Failed to persist metrics",
        table: Optional[str] = None,
    ):
        details = {"table": table}
        super().__init__(message, ErrorCode.PERSISTENCE_FAILED, details, 500)


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'ServiceFailureError',
    'AuthenticationError',
    'InvalidTokenError',
    'AuthorizationError',
    'ConfigurationError',
    'ConfigurationMissingError',
    'DataFetchError',
    'PersistenceError',
]
