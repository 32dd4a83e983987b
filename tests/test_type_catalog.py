import pytest

from athena_query.core.athena_models import ColumnType
from athena_query.core.type_catalog import TypeCatalog

from tests.stubs import StubExecutionService, column_info, results_response


@pytest.mark.asyncio
async def test_resolve_requests_single_row_of_metadata():
    columns = column_info(("a", "bigint"), ("b", "boolean"), ("c", "varchar"))
    service = StubExecutionService(pages=[results_response(columns, [["a", "b", "c"]])])

    catalog = await TypeCatalog.resolve(service, "exec-1")

    assert service.page_calls == [("exec-1", 1, None)]
    assert dict(catalog) == {"a": ColumnType.BIGINT, "b": ColumnType.BOOLEAN, "c": ColumnType.VARCHAR}


def test_iteration_is_reverse_of_service_order():
    catalog = TypeCatalog(column_info(("a", "bigint"), ("b", "boolean"), ("c", "varchar")))

    assert list(catalog) == ["c", "b", "a"]
    assert catalog.columns == ("a", "b", "c")
    assert catalog.positional_names() == ["a", "b", "c"]


def test_unknown_types_and_columns_map_to_other():
    catalog = TypeCatalog(column_info(("d", "DATE"), ("n", "INTEGER")))

    assert catalog["d"] == ColumnType.OTHER
    assert catalog["n"] == ColumnType.INTEGER
    assert catalog.type_of("missing") == ColumnType.OTHER
    assert len(catalog) == 2


def test_positional_names_suffix_repeated_columns():
    catalog = TypeCatalog(column_info(("id", "bigint"), ("id", "varchar"), ("id", "boolean")))

    assert catalog.positional_names() == ["id", "id.1", "id.2"]
    assert catalog.positional_types() == {
        "id": ColumnType.BIGINT,
        "id.1": ColumnType.VARCHAR,
        "id.2": ColumnType.BOOLEAN,
    }
