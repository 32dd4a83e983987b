"""
Transient error classification and the retry policy shared by
submission and polling.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional, TypeVar

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from pydantic import BaseModel, ConfigDict, Field

from athena_query.utils.errors import RetryExhaustedError, TransientServiceError

T = TypeVar("T")

TRANSIENT_ERROR_CODES = frozenset({
    "TooManyRequestsException",
    "ThrottlingException",
    "ThrottledException",
    "RequestLimitExceeded",
    "NetworkingError",
    "UnknownEndpoint",
})


def error_code(exc: BaseException) -> Optional[str]:
    """AWS error code of an exception, if it carries one."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "UNKNOWN")
    return getattr(exc, "code", None)


def is_transient_error(exc: BaseException) -> bool:
    if isinstance(exc, TransientServiceError):
        return True
    if isinstance(exc, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
        return True
    return error_code(exc) in TRANSIENT_ERROR_CODES


class RetryPolicy(BaseModel):
    """
    Fixed-delay retry for transient errors.

    Both caps default to None, which retries forever.
    """
    model_config = ConfigDict(frozen=True)

    delay_seconds: float = Field(2.0, ge=0)
    max_retries: Optional[int] = Field(None, ge=1)
    max_duration_seconds: Optional[float] = Field(None, gt=0)

    @classmethod
    def from_millis(
        cls,
        delay_ms: int,
        max_retries: Optional[int] = None,
        max_duration_seconds: Optional[float] = None,
    ) -> "RetryPolicy":
        return cls(
            delay_seconds=delay_ms / 1000.0,
            max_retries=max_retries,
            max_duration_seconds=max_duration_seconds,
        )

    def ensure_can_retry(
        self, operation: str, attempts: int, started: float, error: BaseException
    ) -> None:
        """
        Raise RetryExhaustedError once either cap is reached.

        attempts counts transient errors so far; max_retries=N allows N
        retries, i.e. N + 1 calls.
        """
        elapsed = time.monotonic() - started
        if self.max_retries is not None and attempts > self.max_retries:
            raise RetryExhaustedError(operation, attempts, elapsed) from error
        if self.max_duration_seconds is not None and elapsed >= self.max_duration_seconds:
            raise RetryExhaustedError(operation, attempts, elapsed) from error


async def run_with_retry(
    operation: str,
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    logger,
    **log_context,
) -> T:
    """Await call(), sleeping policy.delay_seconds after every transient error."""
    attempts = 0
    started = time.monotonic()
    while True:
        try:
            return await call()
        except Exception as e:
            if not is_transient_error(e):
                raise
            attempts += 1
            policy.ensure_can_retry(operation, attempts, started, e)
            logger.warning(
                "transient_error_retry",
                operation=operation,
                attempt=attempts,
                error_code=error_code(e),
                delay_seconds=policy.delay_seconds,
                **log_context
            )
            await asyncio.sleep(policy.delay_seconds)
