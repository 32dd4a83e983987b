"""
Structured Logging with structlog
Provides JSON-formatted logs with context for the query pipeline
"""

import logging
import sys

import structlog


def setup_logging(log_level: str = "INFO") -> structlog.BoundLogger:
    """
    Configure structured logging for the library

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper())
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("athena_query")


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to a component name"""
    return structlog.get_logger(name)


def log_query_execution(
    logger: structlog.BoundLogger,
    database: str,
    status: str,
    **kwargs
):
    """Log query execution"""
    logger.info(
        "query_execution",
        database=database,
        status=status,
        **kwargs
    )


def log_error(
    logger: structlog.BoundLogger,
    error_type: str,
    message: str,
    **kwargs
):
    """Log error with context"""
    logger.error(
        "library_error",
        error_type=error_type,
        message=message,
        **kwargs
    )
