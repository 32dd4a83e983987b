import pytest

from athena_query.core.athena_models import FetchOptions
from athena_query.core.fetcher import ResultFetcher, split_s3_location

from tests.stubs import (
    StubExecutionService,
    StubObjectStore,
    column_info,
    execution,
    results_response,
)

LOCATION = ("results-bucket", "athena/exec-1.csv")
COLUMNS = column_info(("id", "bigint"), ("active", "boolean"))


def test_split_s3_location():
    assert split_s3_location("s3://bucket/a/b/c.txt") == ("bucket", "a/b/c.txt")
    with pytest.raises(ValueError):
        split_s3_location("https://bucket/a")
    with pytest.raises(ValueError):
        split_s3_location(None)


@pytest.mark.asyncio
@pytest.mark.parametrize("statement_type", ["DDL", "UTILITY"])
async def test_non_tabular_statements_read_object_lines(statement_type):
    service = StubExecutionService()
    store = StubObjectStore({LOCATION: b"col1\tval1\nval2\n"})
    fetcher = ResultFetcher(service, store)

    page = await fetcher.fetch(
        execution("SUCCEEDED", statement_type=statement_type),
        FetchOptions(page_size=10, next_token="ignored"),
    )

    assert page.records == [{"col1": "val1"}, {"row": "val2"}]
    assert page.next_token is None
    assert store.calls == [LOCATION]
    assert service.page_calls == []


@pytest.mark.asyncio
async def test_first_page_requests_extra_row_for_header():
    first_page = results_response(COLUMNS, [["id", "active"], ["1", "true"], ["2", "false"]], next_token="tok-2")
    service = StubExecutionService(pages=[first_page, results_response(COLUMNS, [["id", "active"]])])
    fetcher = ResultFetcher(service, StubObjectStore())

    page = await fetcher.fetch(execution("SUCCEEDED"), FetchOptions(page_size=2))

    assert service.page_calls == [("exec-1", 3, None), ("exec-1", 1, None)]
    assert page.records == [{"id": 1, "active": True}, {"id": 2, "active": False}]
    assert page.next_token == "tok-2"


@pytest.mark.asyncio
async def test_later_pages_request_exact_page_size():
    later_page = results_response(COLUMNS, [["3", "TRUE"], ["4", None]])
    service = StubExecutionService(pages=[later_page, results_response(COLUMNS, [["id", "active"]])])
    fetcher = ResultFetcher(service, StubObjectStore())

    page = await fetcher.fetch(execution("SUCCEEDED"), FetchOptions(page_size=2, next_token="tok-2"))

    assert service.page_calls[0] == ("exec-1", 2, "tok-2")
    assert page.records == [{"id": 3, "active": True}, {"id": 4, "active": None}]
    assert page.next_token is None


@pytest.mark.asyncio
async def test_untyped_pagination_returns_raw_page():
    response = results_response(COLUMNS, [["id", "active"], ["1", "true"]], next_token="tok-2")
    service = StubExecutionService(pages=[response])
    fetcher = ResultFetcher(service, StubObjectStore())

    page = await fetcher.fetch(execution("SUCCEEDED"), FetchOptions(page_size=1, format_json=False))

    assert page.raw_response == response
    assert page.records == response["ResultSet"]["Rows"]
    assert page.next_token == "tok-2"
    assert len(service.page_calls) == 1


@pytest.mark.asyncio
async def test_unpaginated_typed_results_decode_csv_object():
    service = StubExecutionService(pages=[results_response(COLUMNS, [["id", "active"]])])
    store = StubObjectStore({LOCATION: b'"id","active"\n"10","false"\n"11",""\n'})
    fetcher = ResultFetcher(service, store)

    page = await fetcher.fetch(execution("SUCCEEDED"), FetchOptions())

    assert page.records == [{"id": 10, "active": False}, {"id": 11, "active": None}]
    assert service.page_calls == [("exec-1", 1, None)]


@pytest.mark.asyncio
async def test_unpaginated_untyped_results_return_lines():
    service = StubExecutionService()
    store = StubObjectStore({LOCATION: b'"id","active"\n"10","false"\n'})
    fetcher = ResultFetcher(service, store)

    page = await fetcher.fetch(execution("SUCCEEDED"), FetchOptions(format_json=False))

    assert page.records == ['"id","active"', '"10","false"']
    assert service.page_calls == []
