from athena_query.core.athena_models import ExecutionRequest
from athena_query.core.ports import ExecutionService
from athena_query.core.retry import RetryPolicy, error_code, run_with_retry
from athena_query.utils.errors import FatalSubmissionError, RetryExhaustedError
from athena_query.utils.logger import get_logger, log_error

logger = get_logger(__name__)


class QuerySubmitter:
    """Starts query executions, retrying transient service errors."""

    def __init__(self, execution_service: ExecutionService, retry_policy: RetryPolicy):
        self.execution_service = execution_service
        self.retry_policy = retry_policy

    async def submit(self, request: ExecutionRequest) -> str:
        """
        Start an execution and return its id

        Raises:
            FatalSubmissionError: The service rejected the request; the
                original exception is chained as __cause__
            RetryExhaustedError: A capped retry policy gave up
        """
        logger.info(
            "query_submit_start",
            database=request.target_database,
            workgroup=request.workgroup,
            query_length=len(request.statement_text)
        )
        try:
            execution_id = await run_with_retry(
                "start_query_execution",
                lambda: self.execution_service.start_execution(request),
                self.retry_policy,
                logger,
                database=request.target_database,
            )
        except RetryExhaustedError:
            raise
        except Exception as e:
            log_error(logger, type(e).__name__, str(e), operation="start_query_execution", error_code=error_code(e))
            raise FatalSubmissionError(str(e), error_code(e)) from e

        logger.info("query_submitted", execution_id=execution_id)
        return execution_id
