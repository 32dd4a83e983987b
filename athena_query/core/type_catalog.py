from collections.abc import Mapping
from typing import Dict, Iterator, List, Sequence, Tuple

from athena_query.core.athena_models import ColumnType
from athena_query.core.ports import ExecutionService
from athena_query.utils.logger import get_logger

logger = get_logger(__name__)


def dedupe_names(names: Sequence[str]) -> List[str]:
    """["x", "x", "y"] -> ["x", "x.1", "y"]"""
    used = set()
    counts: Dict[str, int] = {}
    result = []
    for name in names:
        candidate = name
        while candidate in used:
            counts[name] = counts.get(name, 0) + 1
            candidate = f"{name}.{counts[name]}"
        used.add(candidate)
        result.append(candidate)
    return result


class TypeCatalog(Mapping):
    """
    Read-only column name -> ColumnType mapping for one execution.

    Iteration order is the reverse of the column order the service
    reports. Positional rows are keyed by positional_names(), which
    follows the service order and keeps repeated names apart.
    """

    def __init__(self, column_info: Sequence[Mapping]):
        self._columns: Tuple[str, ...] = tuple(col.get("Name", "") for col in column_info)
        self._column_types: Tuple[ColumnType, ...] = tuple(
            ColumnType.parse(col.get("Type")) for col in column_info
        )
        types: Dict[str, ColumnType] = {}
        for col in reversed(column_info):
            types[col.get("Name", "")] = ColumnType.parse(col.get("Type"))
        self._types = types

    @classmethod
    async def resolve(cls, execution_service: ExecutionService, execution_id: str) -> "TypeCatalog":
        """Read column descriptors from a single-row metadata page."""
        response = await execution_service.get_results_page(execution_id, 1)
        column_info = (
            response.get("ResultSet", {})
            .get("ResultSetMetadata", {})
            .get("ColumnInfo", [])
        )
        catalog = cls(column_info)
        logger.debug(
            "type_catalog_resolved",
            execution_id=execution_id,
            columns=list(catalog.columns)
        )
        return catalog

    @property
    def columns(self) -> Tuple[str, ...]:
        """Column names in service order."""
        return self._columns

    def positional_names(self) -> List[str]:
        """
        Name for each cell position of a positional row.

        Repeated column names get the ".1", ".2" suffixes pandas gives
        duplicate CSV headers, so both result shapes key them the same way.
        """
        return dedupe_names(self._columns)

    def positional_types(self) -> Dict[str, ColumnType]:
        """positional_names() -> declared type of that position."""
        return dict(zip(self.positional_names(), self._column_types))

    def type_of(self, column: str) -> ColumnType:
        return self._types.get(column, ColumnType.OTHER)

    def __getitem__(self, column: str) -> ColumnType:
        return self._types[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"TypeCatalog({dict((k, v.value) for k, v in self._types.items())})"
