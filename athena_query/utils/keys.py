"""
Key helpers for consumers of query results
"""

from typing import Any, Dict, Mapping


def lower_case_keys(obj: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Lowercase the top-level keys of a mapping.

    Keys whose value is None are dropped. Nested mappings are left as-is.
    When two keys collapse to the same lowercase name the later one wins.
    """
    return {
        key.lower(): value
        for key, value in obj.items()
        if value is not None
    }
