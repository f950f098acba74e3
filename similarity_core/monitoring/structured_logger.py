"""
Structured logging system with correlation IDs for the similarity engine.

This module provides structured logging built on structlog, with correlation ID
tracking so that the log lines of one request (for example a CLI search run)
can be grouped together.
"""

import logging
import uuid
import time
import threading
import contextvars
from datetime import datetime, timezone
from typing import Optional
from enum import Enum
import structlog
import json


# Context variable for correlation ID
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Context variable for request ID
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _iso_timestamp(seconds: float) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class CorrelationIdProcessor:
    """Processor to add correlation ID to log records."""

    def __call__(self, logger, method_name, event_dict):
        """Add correlation and request IDs to log event."""
        correlation_id = correlation_id_context.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        request_id = request_id_context.get()
        if request_id:
            event_dict["request_id"] = request_id

        return event_dict


class TimestampProcessor:
    """Processor to add consistent timestamps."""

    def __call__(self, logger, method_name, event_dict):
        now = time.time()
        event_dict["timestamp"] = now
        event_dict["timestamp_iso"] = _iso_timestamp(now)
        return event_dict


class ComponentProcessor:
    """Processor to add component information."""

    def __init__(self, component: str):
        self.component = component

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("component", self.component)
        return event_dict


class SimilarityEngineFormatter:
    """Adds level, logger and thread fields to every event."""

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("level", method_name)
        event_dict.setdefault("logger", getattr(logger, "name", None))

        event_dict["thread_id"] = threading.current_thread().ident
        event_dict["thread_name"] = threading.current_thread().name

        return event_dict


class StructuredLogger:
    """
    Structured logger with correlation ID support.

    Wraps a structlog logger routed through the standard library, so handlers
    installed by configure_logging receive every event.
    """

    def __init__(
        self, name: str, component: Optional[str] = None, log_level: LogLevel = LogLevel.INFO
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            component: Component name for logging context
            log_level: Minimum log level to emit
        """
        self.name = name
        self.component = component or name
        self.log_level = log_level

        self._configure_structlog()

        self.logger = structlog.get_logger(name).bind(component=self.component)

    def _configure_structlog(self):
        """Configure structlog processors and formatters."""
        if structlog.is_configured():
            return

        processors = [
            structlog.stdlib.filter_by_level,
            TimestampProcessor(),
            CorrelationIdProcessor(),
            ComponentProcessor(self.component),
            SimilarityEngineFormatter(),
            structlog.dev.ConsoleRenderer(colors=False),
        ]

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    def _log(self, level: LogLevel, message: str, **kwargs):
        getattr(self.logger, level.value)(message, **kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error message with optional exception."""
        if error:
            kwargs.update(
                {
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                }
            )
        self._log(LogLevel.ERROR, message, **kwargs)

    def with_context(self, **context) -> "StructuredLogger":
        """Create a new logger with additional context."""
        new_logger = StructuredLogger(self.name, self.component, self.log_level)
        new_logger.logger = self.logger.bind(**context)
        return new_logger


class CorrelationIdManager:
    """Manager for correlation ID lifecycle."""

    @staticmethod
    def generate_correlation_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def generate_request_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def get_correlation_id() -> Optional[str]:
        return correlation_id_context.get()

    @staticmethod
    def get_request_id() -> Optional[str]:
        return request_id_context.get()

    @staticmethod
    def clear_context():
        """Clear all context variables."""
        correlation_id_context.set(None)
        request_id_context.set(None)


class LoggingContext:
    """Context manager for logging with correlation IDs."""

    def __init__(self, correlation_id: Optional[str] = None, request_id: Optional[str] = None):
        """
        Initialize logging context.

        Args:
            correlation_id: Correlation ID (generated if not provided)
            request_id: Request ID (generated if not provided)
        """
        self.correlation_id = correlation_id or CorrelationIdManager.generate_correlation_id()
        self.request_id = request_id or CorrelationIdManager.generate_request_id()
        self._tokens = []

    def __enter__(self):
        self._tokens = [
            correlation_id_context.set(self.correlation_id),
            request_id_context.set(self.request_id),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        correlation_token, request_token = self._tokens
        request_id_context.reset(request_token)
        correlation_id_context.reset(correlation_token)


class OperationLogger:
    """Logger for tracking operations with timing."""

    def __init__(self, logger: StructuredLogger, operation: str):
        """
        Initialize operation logger.

        Args:
            logger: Structured logger instance
            operation: Operation name
        """
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.context = {}
        self.duration_ms = None

    def start(self, **context):
        """Start operation logging."""
        self.start_time = time.perf_counter()
        self.context = context
        self.logger.debug(
            f"Starting operation: {self.operation}",
            operation=self.operation,
            operation_status="started",
            **context,
        )

    def _elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000

    def success(self, **additional_context):
        """Log successful operation completion."""
        if self.start_time is not None:
            self.duration_ms = self._elapsed_ms()
            self.logger.info(
                f"Operation completed successfully: {self.operation}",
                operation=self.operation,
                operation_status="success",
                duration_ms=self.duration_ms,
                **{**self.context, **additional_context},
            )

    def error(self, error: Exception, **additional_context):
        """Log operation error."""
        if self.start_time is not None:
            self.duration_ms = self._elapsed_ms()
            self.logger.error(
                f"Operation failed: {self.operation}",
                error=error,
                operation=self.operation,
                operation_status="error",
                duration_ms=self.duration_ms,
                **{**self.context, **additional_context},
            )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.error(exc_val)
        else:
            self.success()


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library logging integration."""

    def format(self, record):
        """Format log record as JSON."""
        log_entry = {
            "timestamp": record.created,
            "timestamp_iso": _iso_timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_id": record.thread,
            "thread_name": record.threadName,
        }

        correlation_id = CorrelationIdManager.get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        request_id = CorrelationIdManager.get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_logger(name: str, component: Optional[str] = None) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name
        component: Component name for context

    Returns:
        Configured structured logger
    """
    return StructuredLogger(name, component)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    log_format: Optional[str] = None,
    enable_console: bool = True,
):
    """
    Configure global logging settings.

    Args:
        log_level: Minimum log level
        json_format: Whether to use JSON formatting
        log_format: Format string for plain-text output
        enable_console: Whether to attach a console handler
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if not enable_console:
        root_logger.addHandler(logging.NullHandler())
        return

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def configure_from_config(logging_config) -> None:
    """Apply a LoggingConfig section."""
    configure_logging(
        log_level=logging_config.level.value,
        json_format=logging_config.json_format,
        log_format=logging_config.format,
        enable_console=logging_config.enable_console,
    )
