import asyncio
import io
from typing import Any, BinaryIO, Dict, Optional

import boto3

from athena_query.core.athena_models import ExecutionRequest, QueryExecution
from athena_query.utils.logger import get_logger

logger = get_logger(__name__)


class AthenaExecutionService:
    """ExecutionService backed by a boto3 Athena client.

    boto3 calls block, so each one runs in a worker thread.
    """

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_region(cls, region_name: str) -> "AthenaExecutionService":
        session = boto3.Session(region_name=region_name)
        logger.info("athena_client_initialized", region=region_name)
        return cls(session.client("athena"))

    async def start_execution(self, request: ExecutionRequest) -> str:
        response = await asyncio.to_thread(
            self.client.start_query_execution, **request.to_start_params()
        )
        return response["QueryExecutionId"]

    async def get_status(self, execution_id: str) -> QueryExecution:
        response = await asyncio.to_thread(
            self.client.get_query_execution, QueryExecutionId=execution_id
        )
        return QueryExecution.from_response(response)

    async def get_results_page(
        self, execution_id: str, max_results: int, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "QueryExecutionId": execution_id,
            "MaxResults": max_results,
        }
        if next_token:
            params["NextToken"] = next_token
        return await asyncio.to_thread(self.client.get_query_results, **params)


class S3ObjectStore:
    """ObjectStore backed by a boto3 S3 client."""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_region(cls, region_name: str) -> "S3ObjectStore":
        session = boto3.Session(region_name=region_name)
        return cls(session.client("s3"))

    async def get_object(self, bucket: str, key: str) -> BinaryIO:
        def _download() -> bytes:
            obj = self.client.get_object(Bucket=bucket, Key=key)
            return obj["Body"].read()

        body = await asyncio.to_thread(_download)
        logger.debug("s3_object_downloaded", bucket=bucket, key=key, size=len(body))
        return io.BytesIO(body)
