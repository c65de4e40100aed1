"""Normalization of heterogeneous adapter result containers into row lists.

Vector stores and database drivers return rows in several shapes: a plain
list, a tuple, a mapping with a ``rows`` key, a driver result object with a
``rows`` attribute, or a generic iterable (cursor). All of them are reduced
to a flat ``list`` of rows here so the services only deal with one shape.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from arborist.core.exceptions import ResultShapeError


def normalize_rows(result: Any) -> list[Any]:
    """Return the rows held by ``result`` as a list.

    Args:
        result: Adapter result in any supported container shape

    Returns:
        List of rows (empty for ``None``)

    Raises:
        ResultShapeError: If the container shape is not recognized
    """
    if result is None:
        return []
    if isinstance(result, list):
        return result
    if isinstance(result, tuple):
        return list(result)
    if isinstance(result, Mapping):
        if "rows" in result:
            return normalize_rows(result["rows"])
        raise ResultShapeError(
            f"Mapping result without 'rows' key (keys: {sorted(map(str, result))})"
        )

    rows = getattr(result, "rows", None)
    if rows is not None:
        return normalize_rows(rows)

    # Strings and bytes are iterable but never a row container
    if isinstance(result, (str, bytes)):
        raise ResultShapeError(f"Unsupported result shape: {type(result).__name__}")

    if isinstance(result, Iterable):
        return list(result)

    raise ResultShapeError(f"Unsupported result shape: {type(result).__name__}")


def row_value(row: Any, key: str, default: Any = None) -> Any:
    """Read a column from a mapping row or an attribute-style row."""
    if isinstance(row, Mapping):
        return row.get(key, default)
    return getattr(row, key, default)
