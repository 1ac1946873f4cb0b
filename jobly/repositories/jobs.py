"""
Jobs Repository.

Responsibilities:
- CRUD operations for the jobs table.
- Title / salary / equity filtering for listings.

Every operation takes the Database handle as its first argument.
A job's company_handle is fixed at creation.
"""

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..database import Database
from ..errors import BadRequestError, NotFoundError
from ..logger import get_logger
from ..sql import NO_VALUE, FilterClause, contains, is_present, sql_for_partial_filter, sql_for_partial_update

UPDATABLE_FIELDS = ("title", "salary", "equity")

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# title -> minSalary -> hasEquity
FILTER_CLAUSES = (
    FilterClause("title", is_present, lambda idx, v: (f"title ILIKE ${idx}", contains(v))),
    FilterClause("minSalary", is_present, lambda idx, v: (f"salary >= ${idx}", v)),
    FilterClause("hasEquity", lambda v: v is True, lambda idx, v: ("equity > 0", NO_VALUE)),
)


def format_equity(value: Any) -> Optional[str]:
    """Render equity as a decimal string whatever numeric type the driver returns."""
    if value is None:
        return None
    return str(Decimal(str(value)))


def _job_record(row: Dict[str, Any]) -> Dict[str, Any]:
    if "equity" in row:
        row["equity"] = format_equity(row["equity"])
    return row


def _not_found(job_id: Any) -> NotFoundError:
    get_logger().warning("Job not found", id=job_id)
    return NotFoundError(f"No job: {job_id}")


def _company_exists(db: Database, handle: str) -> bool:
    result = db.query(
        """SELECT handle
           FROM companies
           WHERE handle = $1""",
        [handle],
    )
    return bool(result.rows)


def create(db: Database, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job and return it.

    Args:
        db: Database handle
        data: {title, salary, equity, companyHandle}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        BadRequestError: If companyHandle is not an existing company
    """
    company_handle = data.get("companyHandle")
    if not _company_exists(db, company_handle):
        get_logger().warning("Job references missing company", companyHandle=company_handle)
        raise BadRequestError(f"Company does not exist: {company_handle}")

    result = db.query(
        f"""INSERT INTO jobs
           (title, salary, equity, company_handle)
           VALUES ($1, $2, $3, $4)
           RETURNING {JOB_COLUMNS}""",
        [data.get("title"), data.get("salary"), data.get("equity"), company_handle],
    )
    job = _job_record(result.rows[0])

    logger = get_logger()
    logger.record_write("job", "created")
    logger.info("Job created", id=job["id"], companyHandle=company_handle)
    return job


def sql_for_job_filter(filters: Optional[Mapping[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Translate job filters into a WHERE clause.

    Recognized keys, applied in this order: title, minSalary, hasEquity.
    hasEquity only filters when it is True and binds no value.

    Example:
        {"minSalary": 200, "hasEquity": True}
        -> ("WHERE salary >= $1 AND equity > 0", [200])
    """
    return sql_for_partial_filter(filters, FILTER_CLAUSES)


def find_all(db: Database, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all jobs matching the optional filters, ordered by title.

    Returns:
        [{id, title, salary, equity, companyHandle, companyName}, ...]
    """
    where_clause, values = sql_for_job_filter(filters)
    result = db.query(
        f"""SELECT j.id,
                  j.title,
                  j.salary,
                  j.equity,
                  j.company_handle AS "companyHandle",
                  c.name AS "companyName"
           FROM jobs j
           JOIN companies c ON c.handle = j.company_handle
           {where_clause}
           ORDER BY j.title""",
        values,
    )
    return [_job_record(row) for row in result.rows]


def get(db: Database, job_id: int) -> Dict[str, Any]:
    """
    Given a job id, return the job with its company.

    Returns:
        {id, title, salary, equity, company}
        where company is {handle, name, description, numEmployees, logoUrl}

    Raises:
        NotFoundError: If no such job
    """
    result = db.query(
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           WHERE id = $1""",
        [job_id],
    )
    if not result.rows:
        raise _not_found(job_id)

    job = _job_record(result.rows[0])
    company_res = db.query(
        """SELECT handle,
                  name,
                  description,
                  num_employees AS "numEmployees",
                  logo_url AS "logoUrl"
           FROM companies
           WHERE handle = $1""",
        [job.pop("companyHandle")],
    )
    job["company"] = company_res.rows[0]
    return job


def find_all_by_company_handle(db: Database, company_handle: str) -> List[Dict[str, Any]]:
    """
    List a company's jobs, ordered by id.

    Returns:
        [{id, title, salary, equity}, ...]; empty if the company has none

    Raises:
        NotFoundError: If no such company
    """
    if not _company_exists(db, company_handle):
        get_logger().warning("Company not found", handle=company_handle)
        raise NotFoundError(f"No company: {company_handle}")

    result = db.query(
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [company_handle],
    )
    return [_job_record(row) for row in result.rows]


def update(db: Database, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the fields in ``data`` change.

    Data can include: {title, salary, equity}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        BadRequestError: If data is empty or names a field that cannot change
        NotFoundError: If no such job
    """
    unknown = [field for field in data if field not in UPDATABLE_FIELDS]
    if unknown:
        raise BadRequestError(f"Cannot update job field(s): {', '.join(unknown)}")

    set_cols, values = sql_for_partial_update(data)
    id_idx = f"${len(values) + 1}"

    result = db.query(
        f"""UPDATE jobs
           SET {set_cols}
           WHERE id = {id_idx}
           RETURNING {JOB_COLUMNS}""",
        [*values, job_id],
    )
    if not result.rows:
        raise _not_found(job_id)

    logger = get_logger()
    logger.record_write("job", "updated")
    logger.info("Job updated", id=job_id, fields=list(data))
    return _job_record(result.rows[0])


def remove(db: Database, job_id: int) -> None:
    """
    Delete a job.

    Raises:
        NotFoundError: If no such job
    """
    result = db.query(
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    )
    if not result.rows:
        raise _not_found(job_id)

    logger = get_logger()
    logger.record_write("job", "removed")
    logger.info("Job removed", id=job_id)
