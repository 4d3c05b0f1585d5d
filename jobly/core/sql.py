"""
Helpers for building parameterized partial updates.

The builder turns ``{"firstName": "Aliya", "age": 32}`` into::

    set_cols = '"first_name"=:p1, "age"=:p2'
    values   = ["Aliya", 32]

Placeholders are positional (``p1`` .. ``pN`` in the mapping's iteration
order). The caller appends its identifying key as ``p{N+1}``, see
``where_placeholder`` and ``bind_positional``.

Column names are NOT escaped beyond quoting: only pass keys that were
validated upstream (request schemas use ``extra="forbid"``).
"""
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jobly.core.exceptions import BadRequestError


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None,
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause and the positional values list for an UPDATE.

    Args:
        data_to_update: external field name -> new value. ``None`` clears the column.
        js_to_sql: external field name -> column name. Unmapped keys pass through.

    Returns:
        (set_cols, values)

    Raises:
        BadRequestError: if ``data_to_update`` is empty.
    """
    keys = list(data_to_update.keys())
    if not keys:
        raise BadRequestError("No data")

    js_to_sql = js_to_sql or {}
    cols = [
        f'"{js_to_sql.get(col_name, col_name)}"=:{placeholder(idx)}'
        for idx, col_name in enumerate(keys, start=1)
    ]

    return ", ".join(cols), list(data_to_update.values())


def placeholder(position: int) -> str:
    return f"p{position}"


def where_placeholder(values: List[Any]) -> str:
    """Bind marker for the key that follows the SET values: ``:p{len(values)+1}``."""
    return f":{placeholder(len(values) + 1)}"


def bind_positional(values: List[Any], *trailing: Any) -> Dict[str, Any]:
    """Map ``values`` (then any trailing key values) onto ``p1``.. bind names."""
    return {
        placeholder(idx): value
        for idx, value in enumerate([*values, *trailing], start=1)
    }
