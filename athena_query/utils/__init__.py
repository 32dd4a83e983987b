"""
Utility modules for the library
"""

from athena_query.utils.logger import setup_logging, get_logger, log_query_execution, log_error
from athena_query.utils.keys import lower_case_keys
from athena_query.utils.errors import (
    AthenaQueryError,
    ConfigurationError,
    TransientServiceError,
    FatalSubmissionError,
    QueryFailedError,
    TypeCoercionError,
    RetryExhaustedError,
)

__all__ = [
    # Logger
    "setup_logging",
    "get_logger",
    "log_query_execution",
    "log_error",
    # Keys
    "lower_case_keys",
    # Errors
    "AthenaQueryError",
    "ConfigurationError",
    "TransientServiceError",
    "FatalSubmissionError",
    "QueryFailedError",
    "TypeCoercionError",
    "RetryExhaustedError",
]
