"""
Logging Configuration and Utilities

Structured logging for the metrics service: stdlib logging with a JSON or
text formatter, structlog processors for request-scoped events, and a
context-carrying adapter used by repositories and services.
"""

import sys
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from contextvars import ContextVar

import structlog
from pythonjsonlogger import jsonlogger

from backoffice.config.settings import settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id: ContextVar[Optional[str]] = ContextVar('user_id', default=None)


class RequestContextProcessor:
    """Add request context to structlog events"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        uid = user_id.get()
        if uid:
            event_dict['user_id'] = uid

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'backoffice-metrics'
        event_dict['environment'] = settings.ENVIRONMENT

        return event_dict


class SecurityLogProcessor:
    """Mask sensitive values in structlog events"""

    SENSITIVE_KEYS = ('password', 'token', 'secret', 'authorization', 'cookie')

    def __call__(self, logger, method_name, event_dict):
        self._sanitize_event_dict(event_dict)
        return event_dict

    def _sanitize_event_dict(self, event_dict: Dict[str, Any]):
        for key in list(event_dict.keys()):
            if any(sensitive in key.lower() for sensitive in self.SENSITIVE_KEYS):
                event_dict[key] = '[REDACTED]'
            elif isinstance(event_dict[key], dict):
                self._sanitize_event_dict(event_dict[key])


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging():
        """Configure structlog on top of the stdlib logger factory"""

        processors = [
            RequestContextProcessor(),
            SecurityLogProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging():
        """Configure standard Python logging"""

        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)

        if settings.LOG_FORMAT == "json":
            formatter = CustomJsonFormatter(
                '%(asctime)s %(name)s %(levelname)s %(message)s'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        LoggingConfig._configure_library_loggers()

    @staticmethod
    def _configure_library_loggers():
        """Reduce noise from external libraries"""
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(
            logging.INFO if settings.DEBUG else logging.WARNING
        )


class LoggerAdapter:
    """Logger adapter that attaches a persistent context to every record"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._context: Dict[str, Any] = {}

    def bind(self, **kwargs) -> "LoggerAdapter":
        """Return a new adapter sharing the logger with extra context"""
        bound = LoggerAdapter(self.logger)
        bound._context = {**self._context, **kwargs}
        return bound

    def _log(self, level: int, message: str, *args, **kwargs):
        extra = dict(kwargs.get('extra') or {})
        extra.update(self._context)
        kwargs['extra'] = extra

        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to the package logger)

    Returns:
        Context-carrying logger adapter
    """
    return LoggerAdapter(logging.getLogger(name or 'backoffice'))


def get_struct_logger(name: Optional[str] = None):
    """Get a structlog logger for request-scoped event logging"""
    return structlog.get_logger(name or 'backoffice')


def setup_logging():
    """Initialize logging configuration"""
    LoggingConfig.configure_structured_logging()
    LoggingConfig.configure_standard_logging()

    get_logger(__name__).info(
        "Logging system initialized",
        extra={'log_level': settings.LOG_LEVEL, 'log_format': settings.LOG_FORMAT},
    )


__all__ = [
    'get_logger',
    'get_struct_logger',
    'setup_logging',
    'LoggerAdapter',
    'LoggingConfig',
    'request_id',
    'user_id',
]
