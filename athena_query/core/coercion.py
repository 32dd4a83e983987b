"""
Type-directed coercion of result cells.

Cells arrive as strings; the declared column type decides the Python
value. bigint becomes an int, so values past 2**53 keep every digit.
"""

import re
from typing import Any, Dict, Mapping, Optional, Union

from athena_query.core.athena_models import ColumnType
from athena_query.utils.errors import TypeCoercionError

_INTEGER_TYPES = frozenset({
    ColumnType.INTEGER,
    ColumnType.TINYINT,
    ColumnType.SMALLINT,
    ColumnType.INT,
})
_FLOAT_TYPES = frozenset({ColumnType.FLOAT, ColumnType.DOUBLE})

# Plain ASCII literals only; int() and float() also take "1_000" and non-ASCII digits.
_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
_NUMBER_LITERAL = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:Infinity|NaN)"
)


def is_null(raw: Any) -> bool:
    """Absent cells and empty strings are null."""
    return raw is None or raw == ""


def coerce_value(
    raw: Any,
    column_type: Union[ColumnType, str],
    column: Optional[str] = None,
) -> Any:
    """
    Convert one raw cell to its typed value

    Raises:
        TypeCoercionError: raw does not parse as column_type
    """
    if is_null(raw):
        return None

    if not isinstance(column_type, ColumnType):
        column_type = ColumnType.parse(column_type)

    if column_type in (ColumnType.VARCHAR, ColumnType.OTHER) or not isinstance(raw, str):
        return raw

    text = raw.strip()
    if column_type == ColumnType.BOOLEAN:
        lowered = text.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise TypeCoercionError(column, raw, column_type.value)

    if column_type == ColumnType.BIGINT:
        if _INTEGER_LITERAL.fullmatch(text):
            return int(text)
        raise TypeCoercionError(column, raw, column_type.value)

    if column_type in _INTEGER_TYPES or column_type in _FLOAT_TYPES:
        if column_type in _INTEGER_TYPES and _INTEGER_LITERAL.fullmatch(text):
            return int(text)
        if _NUMBER_LITERAL.fullmatch(text):
            return float(text)
        raise TypeCoercionError(column, raw, column_type.value)

    return raw


def add_data_types(record: Mapping[str, Any], types: Mapping[str, ColumnType]) -> Dict[str, Any]:
    """Coerce every cell of a record; columns missing from types pass through."""
    return {
        key: coerce_value(value, types.get(key, ColumnType.OTHER), key)
        for key, value in record.items()
    }
