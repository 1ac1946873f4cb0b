"""
Translate partial updates and filters into SQL fragments.

Both helpers return text plus the positional values to bind, using
PostgreSQL-style ``$n`` placeholders (see ``Database.query``).
"""

from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .errors import BadRequestError

# Marker for predicates that compare against a literal and bind nothing.
NO_VALUE = object()


def sql_for_partial_update(
    data: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None,
) -> Tuple[str, List[Any]]:
    """
    Build the SET list of an UPDATE from the fields present in ``data``.

    Args:
        data: Field name -> new value, at least one entry
        js_to_sql: Field name -> column name, only for names that differ

    Returns:
        Tuple of (set_cols, values), e.g.
        ('"first_name"=$1, "age"=$2', ['Aliya', 32])

    Raises:
        BadRequestError: If ``data`` is empty
    """
    if not data:
        raise BadRequestError("No data")

    js_to_sql = js_to_sql or {}
    cols = [
        f'"{js_to_sql.get(field, field)}"=${idx}'
        for idx, field in enumerate(data, start=1)
    ]
    return ", ".join(cols), list(data.values())


class FilterClause(NamedTuple):
    """
    One filter in a declared evaluation order.

    ``applies`` decides whether the filter value yields a predicate;
    ``build`` receives the placeholder index the next bound value will use
    and the filter value, and returns (predicate, value to bind or NO_VALUE).
    """

    key: str
    applies: Callable[[Any], bool]
    build: Callable[[int, Any], Tuple[str, Any]]


def is_present(value: Any) -> bool:
    return value is not None


def sql_for_partial_filter(
    filters: Optional[Mapping[str, Any]],
    clauses: Sequence[FilterClause],
) -> Tuple[str, List[Any]]:
    """
    Build a WHERE clause from the filters present, in the order of ``clauses``.

    Args:
        filters: Filter name -> value; missing or None values are ignored
        clauses: Declared filters, evaluated in sequence order

    Returns:
        Tuple of (where_clause, values); ("", []) when nothing applies, e.g.
        ("WHERE num_employees >= $1 AND name ILIKE $2", [4, "%net%"])
    """
    if not filters:
        return "", []

    predicates: List[str] = []
    values: List[Any] = []
    for clause in clauses:
        value = filters.get(clause.key)
        if not clause.applies(value):
            continue
        predicate, bound = clause.build(len(values) + 1, value)
        predicates.append(predicate)
        if bound is not NO_VALUE:
            values.append(bound)

    if not predicates:
        return "", []
    return f"WHERE {' AND '.join(predicates)}", values


def contains(value: Any) -> str:
    """Wrap a search term for a substring ILIKE match."""
    return f"%{value}%"
