from typing import Any, BinaryIO, Mapping, Optional, Protocol

from athena_query.core.athena_models import ExecutionRequest, QueryExecution


class ExecutionService(Protocol):
    """Port for the remote query-execution service."""

    async def start_execution(self, request: ExecutionRequest) -> str:
        ...

    async def get_status(self, execution_id: str) -> QueryExecution:
        ...

    async def get_results_page(
        self, execution_id: str, max_results: int, next_token: Optional[str] = None
    ) -> Mapping[str, Any]:
        ...


class ObjectStore(Protocol):
    """Port for the object store holding result files."""

    async def get_object(self, bucket: str, key: str) -> BinaryIO:
        ...
