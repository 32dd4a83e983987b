import asyncio
import time

from athena_query.core.athena_models import QueryExecution, QueryState
from athena_query.core.ports import ExecutionService
from athena_query.core.retry import RetryPolicy, error_code, is_transient_error
from athena_query.utils.errors import QueryFailedError
from athena_query.utils.logger import get_logger

logger = get_logger(__name__)


class ExecutionPoller:
    """
    Polls an execution until it reaches a terminal state.

    SUBMITTED -> (QUEUED | RUNNING)* -> SUCCEEDED | FAILED | CANCELLED.
    A transient error from the status check swaps the caller's interval
    for the retry policy delay until the next successful check.
    """

    def __init__(self, execution_service: ExecutionService, retry_policy: RetryPolicy):
        self.execution_service = execution_service
        self.retry_policy = retry_policy

    async def await_completion(self, execution_id: str, poll_interval_ms: int) -> QueryExecution:
        """
        Wait for a terminal state

        Args:
            execution_id: Id returned by the submitter
            poll_interval_ms: Delay between status checks

        Returns:
            Execution metadata of the SUCCEEDED query

        Raises:
            QueryFailedError: The query ended FAILED or CANCELLED
            RetryExhaustedError: A capped retry policy gave up
        """
        if poll_interval_ms is None or poll_interval_ms < 0:
            raise ValueError(f"poll_interval_ms must be a non-negative number, got {poll_interval_ms!r}")
        poll_interval = poll_interval_ms / 1000.0

        state = QueryState.SUBMITTED
        transient_errors = 0
        first_transient_at = 0.0
        polls = 0

        while True:
            try:
                execution = await self.execution_service.get_status(execution_id)
            except Exception as e:
                if not is_transient_error(e):
                    raise
                if not transient_errors:
                    first_transient_at = time.monotonic()
                transient_errors += 1
                self.retry_policy.ensure_can_retry(
                    "get_query_execution", transient_errors, first_transient_at, e
                )
                logger.warning(
                    "transient_error_retry",
                    operation="get_query_execution",
                    execution_id=execution_id,
                    attempt=transient_errors,
                    error_code=error_code(e),
                    delay_seconds=self.retry_policy.delay_seconds
                )
                await asyncio.sleep(self.retry_policy.delay_seconds)
                continue

            transient_errors = 0
            polls += 1
            if execution.state != state:
                logger.debug(
                    "query_state_polled",
                    execution_id=execution_id,
                    previous_state=state.value,
                    state=execution.state.value,
                    polls=polls
                )
                state = execution.state

            if state == QueryState.SUCCEEDED:
                logger.info(
                    "query_succeeded",
                    execution_id=execution_id,
                    statement_type=execution.statement_type.value if execution.statement_type else None,
                    polls=polls
                )
                return execution

            if state in (QueryState.FAILED, QueryState.CANCELLED):
                logger.warning(
                    "query_failed",
                    execution_id=execution_id,
                    state=state.value,
                    reason=execution.state_change_reason
                )
                raise QueryFailedError(execution.state_change_reason, execution_id, state.value)

            await asyncio.sleep(poll_interval)
