"""
athena_query
Submit Athena queries, poll them to completion and decode typed results
"""

from athena_query.core.athena_models import (
    ColumnType,
    ExecutionRequest,
    FetchOptions,
    Page,
    QueryExecution,
    QueryResult,
    QueryState,
    StatementType,
)
from athena_query.core.retry import RetryPolicy, is_transient_error
from athena_query.services.query_service import AthenaQueryService
from athena_query.utils.keys import lower_case_keys
from athena_query.utils.errors import (
    AthenaQueryError,
    ConfigurationError,
    FatalSubmissionError,
    QueryFailedError,
    RetryExhaustedError,
    TransientServiceError,
    TypeCoercionError,
)

__version__ = "0.1.0"

__all__ = [
    "AthenaQueryService",
    "ColumnType",
    "ExecutionRequest",
    "FetchOptions",
    "Page",
    "QueryExecution",
    "QueryResult",
    "QueryState",
    "StatementType",
    "RetryPolicy",
    "is_transient_error",
    "lower_case_keys",
    "AthenaQueryError",
    "ConfigurationError",
    "FatalSubmissionError",
    "QueryFailedError",
    "RetryExhaustedError",
    "TransientServiceError",
    "TypeCoercionError",
]
