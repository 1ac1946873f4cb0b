from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List
from urllib.parse import urlparse

HANDLE_MAX_LENGTH = 25

COMPANY_UPDATE_FIELDS = ["name", "description", "numEmployees", "logoUrl"]
JOB_UPDATE_FIELDS = ["title", "salary", "equity"]
COMPANY_FILTER_FIELDS = ["name", "minEmployees", "maxEmployees"]
JOB_FILTER_FIELDS = ["title", "minSalary", "hasEquity"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_non_negative_int(v: Any) -> bool:
    # bool is an int subclass
    return isinstance(v, int) and not isinstance(v, bool) and v >= 0


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def _valid_equity(v: Any) -> bool:
    if not isinstance(v, str):
        return False
    try:
        d = Decimal(v)
    except InvalidOperation:
        return False
    return d.is_finite() and Decimal(0) <= d <= Decimal(1)


def _check_company_fields(data: Dict[str, Any], errors: List[str]) -> None:
    for f in ("name", "description"):
        if f in data and not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if data.get("numEmployees") is not None and not _is_non_negative_int(data["numEmployees"]):
        errors.append("Field 'numEmployees' must be a non-negative integer")

    logo_url = data.get("logoUrl")
    if logo_url is not None:
        if not isinstance(logo_url, str) or not _valid_url(logo_url):
            errors.append("Field 'logoUrl' must be a valid absolute URL (scheme + host)")


def _check_job_fields(data: Dict[str, Any], errors: List[str]) -> None:
    if "title" in data and not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")

    if data.get("salary") is not None and not _is_non_negative_int(data["salary"]):
        errors.append("Field 'salary' must be a non-negative integer")

    if data.get("equity") is not None and not _valid_equity(data["equity"]):
        errors.append("Field 'equity' must be a decimal string between 0 and 1")


def _check_update(data: Dict[str, Any], allowed: List[str], errors: List[str]) -> None:
    if not data:
        errors.append("No data")
    for f in data:
        if f not in allowed:
            errors.append(f"Field '{f}' cannot be updated")


def validate_company_new(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []

    for f in ("handle", "name", "description"):
        if f not in data:
            errors.append(f"Missing required field: {f}")

    handle = data.get("handle")
    if "handle" in data:
        if not _is_non_empty_str(handle):
            errors.append("Field 'handle' must be a non-empty string")
        elif len(handle) > HANDLE_MAX_LENGTH:
            errors.append(f"Field 'handle' length must be at most {HANDLE_MAX_LENGTH}")

    _check_company_fields(data, errors)
    return errors


def validate_company_update(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    _check_update(data, COMPANY_UPDATE_FIELDS, errors)
    _check_company_fields(data, errors)
    return errors


def validate_job_new(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Whether companyHandle exists is checked by the repository.
    """
    errors: List[str] = []

    for f in ("title", "companyHandle"):
        if f not in data:
            errors.append(f"Missing required field: {f}")

    if "companyHandle" in data and not _is_non_empty_str(data["companyHandle"]):
        errors.append("Field 'companyHandle' must be a non-empty string")

    _check_job_fields(data, errors)
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    _check_update(data, JOB_UPDATE_FIELDS, errors)
    _check_job_fields(data, errors)
    return errors


def validate_company_filter(filters: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for f in filters:
        if f not in COMPANY_FILTER_FIELDS:
            errors.append(f"Unknown filter: {f}")
    for f in ("minEmployees", "maxEmployees"):
        if filters.get(f) is not None and not _is_non_negative_int(filters[f]):
            errors.append(f"Filter '{f}' must be a non-negative integer")
    if "name" in filters and not _is_non_empty_str(filters["name"]):
        errors.append("Filter 'name' must be a non-empty string")
    return errors


def validate_job_filter(filters: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for f in filters:
        if f not in JOB_FILTER_FIELDS:
            errors.append(f"Unknown filter: {f}")
    if filters.get("minSalary") is not None and not _is_non_negative_int(filters["minSalary"]):
        errors.append("Filter 'minSalary' must be a non-negative integer")
    if "hasEquity" in filters and not isinstance(filters["hasEquity"], bool):
        errors.append("Filter 'hasEquity' must be a boolean")
    if "title" in filters and not _is_non_empty_str(filters["title"]):
        errors.append("Filter 'title' must be a non-empty string")
    return errors
