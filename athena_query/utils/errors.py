"""
Custom Exception Classes
Provides clear, structured error handling across the query pipeline
"""

from typing import Optional, Dict, Any


class AthenaQueryError(Exception):
    """Base exception for all library errors"""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AthenaQueryError, TypeError):
    """Required collaborator missing at construction time"""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details
        )


class TransientServiceError(AthenaQueryError):
    """Rate limiting, throttling or a transient network/endpoint failure"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="TRANSIENT_SERVICE_ERROR",
            details={"code": code} if code else {}
        )
        self.code = code


class FatalSubmissionError(AthenaQueryError):
    """Submission failed with a non-transient error"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="SUBMISSION_FAILED",
            details={"code": code} if code else {}
        )
        self.code = code


class QueryFailedError(AthenaQueryError):
    """Query reached FAILED or CANCELLED"""

    def __init__(
        self,
        reason: Optional[str],
        execution_id: Optional[str] = None,
        state: str = "FAILED"
    ):
        super().__init__(
            message=reason or f"Query {state.lower()}",
            error_code=f"QUERY_{state}",
            details={"execution_id": execution_id} if execution_id else {}
        )
        self.reason = reason
        self.execution_id = execution_id
        self.state = state


class TypeCoercionError(AthenaQueryError, ValueError):
    """Cell value does not parse as its declared column type"""

    def __init__(self, column: Optional[str], raw_value: Any, declared_type: str):
        super().__init__(
            message=f"Cannot coerce {raw_value!r} to {declared_type} (column {column!r})",
            error_code="TYPE_COERCION_ERROR",
            details={
                "column": column,
                "raw_value": raw_value,
                "declared_type": declared_type,
            }
        )
        self.column = column
        self.raw_value = raw_value
        self.declared_type = declared_type


class RetryExhaustedError(AthenaQueryError):
    """A bounded retry policy ran out of attempts or time"""

    def __init__(self, operation: str, attempts: int, elapsed_seconds: float):
        super().__init__(
            message=f"{operation} still failing after {attempts} transient errors",
            error_code="RETRY_EXHAUSTED",
            details={
                "operation": operation,
                "attempts": attempts,
                "elapsed_seconds": round(elapsed_seconds, 3),
            }
        )
        self.attempts = attempts
