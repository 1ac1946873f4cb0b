"""
Companies Repository.

Responsibilities:
- CRUD operations for the companies table.
- Name / employee-count filtering for listings.

Every operation takes the Database handle as its first argument.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..database import Database
from ..errors import BadRequestError, NotFoundError
from ..logger import get_logger
from ..sql import FilterClause, contains, is_present, sql_for_partial_filter, sql_for_partial_update
from . import jobs

UPDATABLE_FIELDS = ("name", "description", "numEmployees", "logoUrl")

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

COMPANY_COLUMNS = (
    "handle, name, description, "
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

FILTER_CLAUSES = (
    FilterClause("minEmployees", is_present, lambda idx, v: (f"num_employees >= ${idx}", v)),
    FilterClause("maxEmployees", is_present, lambda idx, v: (f"num_employees <= ${idx}", v)),
    FilterClause("name", is_present, lambda idx, v: (f"name ILIKE ${idx}", contains(v))),
)


def _not_found(handle: str) -> NotFoundError:
    get_logger().warning("Company not found", handle=handle)
    return NotFoundError(f"No company: {handle}")


def _check_name_free(db: Database, name: Any, handle: Any = None) -> None:
    """Raise BadRequestError if another company already uses ``name``."""
    result = db.query(
        """SELECT handle
           FROM companies
           WHERE name = $1 AND handle <> $2""",
        [name, handle or ""],
    )
    if result.rows:
        get_logger().warning("Duplicate company name", name=name)
        raise BadRequestError(f"Duplicate company name: {name}")


def _employee_count(key: str, value: Any) -> Any:
    """Coerce an employee bound to int; query strings arrive as text."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"{key} must be an integer: {value}") from None


def create(db: Database, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company and return it.

    Args:
        db: Database handle
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If the handle or name is already taken
    """
    handle = data.get("handle")
    duplicate_check = db.query(
        """SELECT handle
           FROM companies
           WHERE handle = $1""",
        [handle],
    )
    if duplicate_check.rows:
        get_logger().warning("Duplicate company", handle=handle)
        raise BadRequestError(f"Duplicate company: {handle}")
    _check_name_free(db, data.get("name"))

    result = db.query(
        f"""INSERT INTO companies
           (handle, name, description, num_employees, logo_url)
           VALUES ($1, $2, $3, $4, $5)
           RETURNING {COMPANY_COLUMNS}""",
        [
            handle,
            data.get("name"),
            data.get("description"),
            data.get("numEmployees"),
            data.get("logoUrl"),
        ],
    )
    company = result.rows[0]

    logger = get_logger()
    logger.record_write("company", "created")
    logger.info("Company created", handle=handle)
    return company


def sql_for_company_filter(filters: Optional[Mapping[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Translate company filters into a WHERE clause.

    Recognized keys, applied in this order: minEmployees, maxEmployees, name.

    Example:
        {"minEmployees": 3, "name": "net"}
        -> ("WHERE num_employees >= $1 AND name ILIKE $2", [3, "%net%"])

    Raises:
        BadRequestError: If a bound is not an integer, or minEmployees is
            larger than maxEmployees
    """
    filters = dict(filters or {})
    for key in ("minEmployees", "maxEmployees"):
        if key in filters:
            filters[key] = _employee_count(key, filters[key])
    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError(
            f"Min employees: {min_employees} cannot be larger than "
            f"max employees: {max_employees}"
        )
    return sql_for_partial_filter(filters, FILTER_CLAUSES)


def find_all(db: Database, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all companies matching the optional filters, ordered by name.

    Args:
        db: Database handle
        filters: Optional {name, minEmployees, maxEmployees}

    Returns:
        [{handle, name, description, numEmployees, logoUrl}, ...]
    """
    where_clause, values = sql_for_company_filter(filters)
    result = db.query(
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           {where_clause}
           ORDER BY name""",
        values,
    )
    return result.rows


def get(db: Database, handle: str) -> Dict[str, Any]:
    """
    Given a company handle, return the company with its jobs.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...]

    Raises:
        NotFoundError: If no such company
    """
    result = db.query(
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           WHERE handle = $1""",
        [handle],
    )
    if not result.rows:
        raise _not_found(handle)

    company = result.rows[0]
    company["jobs"] = jobs.find_all_by_company_handle(db, handle)
    return company


def update(db: Database, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the fields in ``data`` change.

    Data can include: {name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If data is empty, names a field that cannot change,
            or renames the company to a name already in use
        NotFoundError: If no such company
    """
    unknown = [field for field in data if field not in UPDATABLE_FIELDS]
    if unknown:
        raise BadRequestError(f"Cannot update company field(s): {', '.join(unknown)}")

    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    if "name" in data:
        _check_name_free(db, data["name"], handle)
    handle_idx = f"${len(values) + 1}"

    result = db.query(
        f"""UPDATE companies
           SET {set_cols}
           WHERE handle = {handle_idx}
           RETURNING {COMPANY_COLUMNS}""",
        [*values, handle],
    )
    if not result.rows:
        raise _not_found(handle)

    logger = get_logger()
    logger.record_write("company", "updated")
    logger.info("Company updated", handle=handle, fields=list(data))
    return result.rows[0]


def remove(db: Database, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        NotFoundError: If no such company
    """
    result = db.query(
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    )
    if not result.rows:
        raise _not_found(handle)

    logger = get_logger()
    logger.record_write("company", "removed")
    logger.info("Company removed", handle=handle)
