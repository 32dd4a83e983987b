"""
Result decoding for the three shapes the service produces: positional
rows from GetQueryResults, CSV result objects, and tab-separated text
written by DDL/utility statements.
"""

import io
import re
from typing import AbstractSet, Any, BinaryIO, Dict, Iterator, List, Mapping, Sequence, Set

import pandas as pd
from pandas.errors import EmptyDataError

from athena_query.core.coercion import add_data_types
from athena_query.core.type_catalog import TypeCatalog

NON_TABULAR_KEY = "row"


def _text_lines(stream: BinaryIO) -> Iterator[str]:
    # Undecodable bytes become U+FFFD instead of failing the whole object.
    for line in io.TextIOWrapper(stream, encoding="utf-8", errors="replace"):
        yield line.rstrip("\r\n")


_DUPLICATE_SUFFIX = re.compile(r"(.+)\.(\d+)")


def _duplicate_headers(headers: Sequence[str]) -> Set[str]:
    """Headers pandas renamed from a repeated name, e.g. "id.1" next to "id"."""
    present = set(headers)
    duplicates = set()
    for header in headers:
        match = _DUPLICATE_SUFFIX.fullmatch(header)
        if match and match.group(1) in present:
            duplicates.add(header)
    return duplicates


def _nest_keys(record: Mapping[str, Any], literal_keys: AbstractSet[str] = frozenset()) -> Dict[str, Any]:
    """Turn dotted keys into nested dicts: {"a.b": 1} -> {"a": {"b": 1}}."""
    nested: Dict[str, Any] = {}
    for key, value in record.items():
        if key in literal_keys:
            nested[key] = value
            continue
        parts = key.split(".")
        target = nested
        for part in parts[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = target[part] = {}
            target = child
        target[parts[-1]] = value
    return nested


class ResultDecoder:
    """Stateless decoder; every method consumes its input once."""

    def decode_positional(
        self,
        rows: Sequence[Mapping[str, Any]],
        catalog: TypeCatalog,
        skip_rows: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Decode GetQueryResults rows into typed records

        Args:
            rows: ResultSet.Rows, each {"Data": [{"VarCharValue": ...}, ...]}
            catalog: Column types of the execution
            skip_rows: Leading rows to drop (the header row on a first page)
        """
        names = catalog.positional_names()
        types = catalog.positional_types()
        records = []
        for row in rows[skip_rows:]:
            record = {}
            for position, cell in enumerate(row.get("Data", [])):
                name = names[position] if position < len(names) else f"_col{position}"
                record[name] = cell.get("VarCharValue")
            records.append(add_data_types(record, types))
        return records

    def decode_delimited(
        self,
        stream: BinaryIO,
        catalog: TypeCatalog,
        ignore_empty_lines: bool = True,
        flatten_nested_keys: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Decode a CSV result object with a header row into typed records

        Args:
            stream: Raw bytes of the result object
            catalog: Column types of the execution
            ignore_empty_lines: Skip blank lines instead of yielding all-null records
            flatten_nested_keys: Keep dotted headers as they are instead of nesting
        """
        try:
            df = pd.read_csv(
                stream,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=ignore_empty_lines,
                encoding="utf-8",
                encoding_errors="replace",
            )
        except EmptyDataError:
            return []

        headers = [str(column) for column in df.columns]
        duplicates = _duplicate_headers(headers)
        if len(headers) == len(catalog.columns):
            types = dict(zip(headers, catalog.positional_types().values()))
        else:
            types = dict(catalog)

        records = []
        for row in df.fillna("").to_dict(orient="records"):
            record = row if flatten_nested_keys else _nest_keys(row, duplicates)
            records.append(add_data_types(record, types))
        return records

    def decode_lines(self, stream: BinaryIO) -> List[Dict[str, str]]:
        """
        Decode DDL/utility output

        "key\\tvalue" lines become {key: value}; other non-blank lines
        become {"row": line}. Values stay strings.
        """
        records = []
        for line in _text_lines(stream):
            if line.find("\t") > 0:
                parts = line.split("\t")
                records.append({parts[0].strip(): parts[1].strip()})
            elif line.strip():
                records.append({NON_TABULAR_KEY: line.strip()})
        return records

    def raw_lines(self, stream: BinaryIO) -> List[str]:
        """Every line of the object, trimmed, blank lines included."""
        return [line.strip() for line in _text_lines(stream)]
