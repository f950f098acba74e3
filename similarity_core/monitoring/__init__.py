"""
Logging and observability helpers for the similarity engine.
"""

from .structured_logger import (
    StructuredLogger,
    LoggingContext,
    OperationLogger,
    CorrelationIdManager,
    JSONFormatter,
    get_logger,
    configure_logging,
    configure_from_config,
)

__all__ = [
    "StructuredLogger",
    "LoggingContext",
    "OperationLogger",
    "CorrelationIdManager",
    "JSONFormatter",
    "get_logger",
    "configure_logging",
    "configure_from_config",
]
