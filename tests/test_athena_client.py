import pytest

from athena_query.config import Settings
from athena_query.core import athena_client
from athena_query.core.athena_client import AthenaExecutionService, S3ObjectStore
from athena_query.core.athena_models import ExecutionRequest, QueryState
from athena_query.services.query_service import AthenaQueryService


class StubBody:
    def __init__(self, data: bytes):
        self.data = data

    def read(self):
        return self.data


class StubBotoClient:
    def __init__(self, service_name="athena"):
        self.service_name = service_name
        self.calls = []

    def start_query_execution(self, **kwargs):
        self.calls.append(("start_query_execution", kwargs))
        return {"QueryExecutionId": "exec-1"}

    def get_query_execution(self, **kwargs):
        self.calls.append(("get_query_execution", kwargs))
        return {
            "QueryExecution": {
                "QueryExecutionId": kwargs["QueryExecutionId"],
                "StatementType": "DML",
                "Status": {"State": "RUNNING"},
            }
        }

    def get_query_results(self, **kwargs):
        self.calls.append(("get_query_results", kwargs))
        return {"ResultSet": {"Rows": []}}

    def get_object(self, **kwargs):
        self.calls.append(("get_object", kwargs))
        return {"Body": StubBody(b"a,b\n1,2\n")}


class StubSession:
    created = []

    def __init__(self, region_name=None):
        self.region_name = region_name

    def client(self, service_name):
        client = StubBotoClient(service_name)
        StubSession.created.append((self.region_name, service_name))
        return client


@pytest.mark.asyncio
async def test_execution_service_translates_calls():
    client = StubBotoClient()
    service = AthenaExecutionService(client)

    execution_id = await service.start_execution(
        ExecutionRequest(statement_text="SELECT 1", target_database="sales")
    )
    status = await service.get_status(execution_id)
    await service.get_results_page(execution_id, 11)
    await service.get_results_page(execution_id, 10, "tok-2")

    assert execution_id == "exec-1"
    assert status.state == QueryState.RUNNING
    assert client.calls[0][1]["QueryExecutionContext"] == {"Database": "sales", "Catalog": "AwsDataCatalog"}
    assert client.calls[2] == ("get_query_results", {"QueryExecutionId": "exec-1", "MaxResults": 11})
    assert client.calls[3] == (
        "get_query_results",
        {"QueryExecutionId": "exec-1", "MaxResults": 10, "NextToken": "tok-2"},
    )


@pytest.mark.asyncio
async def test_object_store_returns_readable_stream():
    client = StubBotoClient("s3")

    stream = await S3ObjectStore(client).get_object("bucket", "a/b.csv")

    assert stream.read() == b"a,b\n1,2\n"
    assert client.calls == [("get_object", {"Bucket": "bucket", "Key": "a/b.csv"})]


def test_from_settings_builds_boto3_clients(monkeypatch):
    StubSession.created = []
    monkeypatch.setattr(athena_client.boto3, "Session", StubSession)

    service = AthenaQueryService.from_settings(Settings(AWS_REGION="eu-west-1", LOG_LEVEL="WARNING"))

    assert StubSession.created == [("eu-west-1", "athena"), ("eu-west-1", "s3")]
    assert service.settings.AWS_REGION == "eu-west-1"
