import pytest

from jobly.core.exceptions import BadRequestError
from jobly.core.sql import bind_positional, sql_for_partial_update, where_placeholder


def test_partial_update_translates_aliases():
    """Mapped keys become their column names, unmapped keys pass through."""
    set_cols, values = sql_for_partial_update(
        {"firstName": "Aliya", "age": 32},
        {"firstName": "first_name"},
    )
    assert set_cols == '"first_name"=:p1, "age"=:p2'
    assert values == ["Aliya", 32]


def test_partial_update_without_aliases():
    set_cols, values = sql_for_partial_update({"name": "New", "description": "D"})
    assert set_cols == '"name"=:p1, "description"=:p2'
    assert values == ["New", "D"]


def test_partial_update_numbering_follows_iteration_order():
    data = {f"col{i}": i * 10 for i in range(1, 6)}
    set_cols, values = sql_for_partial_update(data)

    fragments = set_cols.split(", ")
    assert len(fragments) == len(values) == len(data)
    for position, fragment in enumerate(fragments, start=1):
        assert fragment == f'"col{position}"=:p{position}'
    assert values == [10, 20, 30, 40, 50]
    assert where_placeholder(values) == ":p6"


def test_partial_update_keeps_null_values():
    """None is a value to store (SQL NULL), not an absent field."""
    set_cols, values = sql_for_partial_update({"logoUrl": None}, {"logoUrl": "logo_url"})
    assert set_cols == '"logo_url"=:p1'
    assert values == [None]


def test_partial_update_does_not_coerce_values():
    marker = object()
    _, values = sql_for_partial_update({"a": "5", "b": marker, "c": False})
    assert values[0] == "5"
    assert values[1] is marker
    assert values[2] is False


def test_partial_update_empty_data():
    with pytest.raises(BadRequestError) as exc_info:
        sql_for_partial_update({})
    assert exc_info.value.message == "No data"


def test_bind_positional_appends_trailing_key():
    _, values = sql_for_partial_update({"title": "New", "salary": None})
    assert bind_positional(values, 7) == {"p1": "New", "p2": None, "p3": 7}
