"""
Query Service
Library surface: submit, await and fetch, or all three through query()
"""

from typing import Any, Optional

from athena_query.config import Settings, settings as default_settings
from athena_query.core.athena_client import AthenaExecutionService, S3ObjectStore
from athena_query.core.athena_models import (
    ExecutionRequest,
    FetchOptions,
    Page,
    QueryExecution,
    QueryResult,
)
from athena_query.core.fetcher import ResultFetcher
from athena_query.core.poller import ExecutionPoller
from athena_query.core.ports import ExecutionService, ObjectStore
from athena_query.core.retry import RetryPolicy
from athena_query.core.submitter import QuerySubmitter
from athena_query.utils.errors import ConfigurationError
from athena_query.utils.logger import get_logger, log_query_execution, setup_logging

logger = get_logger(__name__)

# 5 USD per TB scanned, billed per MB with a 10 MB minimum
COST_PER_MB_USD = 5.0 / (1024 * 1024)
MIN_BILLED_MB = 10


def query_cost_usd(data_scanned_in_mb: float) -> float:
    return round(max(data_scanned_in_mb, MIN_BILLED_MB) * COST_PER_MB_USD, 10)


class AthenaQueryService:
    """Runs Athena queries and decodes their results"""

    def __init__(
        self,
        execution_service: Optional[ExecutionService],
        object_store: Optional[ObjectStore],
        retry_policy: Optional[RetryPolicy] = None,
        settings: Optional[Settings] = None,
    ):
        if execution_service is None or object_store is None:
            raise ConfigurationError(
                "execution_service and object_store are required",
                details={
                    "execution_service": execution_service is not None,
                    "object_store": object_store is not None,
                }
            )
        self.settings = settings or default_settings
        self.retry_policy = retry_policy or RetryPolicy.from_millis(
            self.settings.TRANSIENT_RETRY_DELAY_MS,
            max_retries=self.settings.MAX_RETRIES,
            max_duration_seconds=self.settings.MAX_RETRY_DURATION_SECONDS,
        )
        self.submitter = QuerySubmitter(execution_service, self.retry_policy)
        self.poller = ExecutionPoller(execution_service, self.retry_policy)
        self.fetcher = ResultFetcher(execution_service, object_store)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AthenaQueryService":
        """Build the service on boto3 clients for the configured region"""
        settings = settings or default_settings
        setup_logging(settings.LOG_LEVEL)
        return cls(
            AthenaExecutionService.from_region(settings.AWS_REGION),
            S3ObjectStore.from_region(settings.AWS_REGION),
            settings=settings,
        )

    def build_request(self, statement_text: str, **overrides: Any) -> ExecutionRequest:
        """ExecutionRequest with database, catalog, workgroup and output location from settings"""
        values = {
            "statement_text": statement_text,
            "target_database": self.settings.ATHENA_DATABASE,
            "target_catalog": self.settings.ATHENA_CATALOG,
            "workgroup": self.settings.ATHENA_WORKGROUP,
            "output_location": self.settings.ATHENA_S3_OUTPUT_LOCATION,
        }
        values.update(overrides)
        return ExecutionRequest(**values)

    def default_fetch_options(self, **overrides: Any) -> FetchOptions:
        values = {
            "format_json": self.settings.FORMAT_JSON,
            "ignore_empty_lines": self.settings.IGNORE_EMPTY_LINES,
            "flatten_nested_keys": self.settings.FLATTEN_NESTED_KEYS,
        }
        values.update(overrides)
        return FetchOptions(**values)

    async def submit_query(self, request: ExecutionRequest) -> str:
        return await self.submitter.submit(request)

    async def await_completion(
        self, execution_id: str, poll_interval_ms: Optional[int] = None
    ) -> QueryExecution:
        if poll_interval_ms is None:
            poll_interval_ms = self.settings.POLL_INTERVAL_MS
        return await self.poller.await_completion(execution_id, poll_interval_ms)

    async def fetch_results(
        self, execution: QueryExecution, options: Optional[FetchOptions] = None
    ) -> Page:
        return await self.fetcher.fetch(execution, options or self.default_fetch_options())

    async def query(
        self,
        request: Optional[ExecutionRequest] = None,
        options: Optional[FetchOptions] = None,
        execution_id: Optional[str] = None,
        poll_interval_ms: Optional[int] = None,
        get_stats: Optional[bool] = None,
    ) -> QueryResult:
        """
        Submit, wait and fetch in one call

        Args:
            request: Statement to run; ignored when execution_id is given
            options: Fetch options, defaults from settings
            execution_id: Existing execution to fetch instead of submitting,
                e.g. with options.next_token for the following page
            poll_interval_ms: Delay between status checks
            get_stats: Attach scan size, cost and engine time

        Returns:
            QueryResult with the decoded items
        """
        if execution_id is None:
            if request is None:
                raise ValueError("Either request or execution_id is required")
            execution_id = await self.submit_query(request)

        execution = await self.await_completion(execution_id, poll_interval_ms)
        page = await self.fetch_results(execution, options)

        result = QueryResult(
            execution_id=execution_id,
            items=page.records,
            count=len(page.records),
            next_token=page.next_token,
        )
        if get_stats is None:
            get_stats = self.settings.GET_STATS
        if get_stats:
            data_scanned_in_mb = round(execution.data_scanned_bytes / (1024 * 1024), 2)
            result.data_scanned_in_mb = data_scanned_in_mb
            result.query_cost_in_usd = query_cost_usd(data_scanned_in_mb)
            result.engine_execution_time_ms = execution.engine_execution_time_ms
            result.s3_location = execution.output_location

        log_query_execution(
            logger,
            database=request.target_database if request else "",
            status=execution.state.value,
            execution_id=execution_id,
            row_count=result.count
        )
        return result
