import argparse
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from . import __version__
from . import env
from .database import Database, init_database
from .errors import JoblyError
from .logger import get_logger
from .repositories import companies, jobs
from .schema import (
    validate_company_filter,
    validate_company_new,
    validate_company_update,
    validate_job_filter,
    validate_job_new,
    validate_job_update,
)


def _open_db(args: argparse.Namespace) -> Database:
    return Database(args.database or env.get_database_url(), echo=env.echo_sql())


def _load_json(path_str: str) -> Dict[str, Any]:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _check(errors: List[str]) -> None:
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)


def _print(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _filters(**kwargs) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def cmd_init_db(args: argparse.Namespace, db: Database) -> None:
    init_database(db)
    print(f"Initialized {db.engine.url.render_as_string(hide_password=True)}")


def cmd_companies(args: argparse.Namespace, db: Database) -> None:
    filters = _filters(
        name=args.name,
        minEmployees=args.min_employees,
        maxEmployees=args.max_employees,
    )
    _check(validate_company_filter(filters))
    _print(companies.find_all(db, filters))


def cmd_company(args: argparse.Namespace, db: Database) -> None:
    _print(companies.get(db, args.handle))


def cmd_create_company(args: argparse.Namespace, db: Database) -> None:
    data = _load_json(args.input)
    _check(validate_company_new(data))
    _print(companies.create(db, data))


def cmd_update_company(args: argparse.Namespace, db: Database) -> None:
    data = _load_json(args.input)
    _check(validate_company_update(data))
    _print(companies.update(db, args.handle, data))


def cmd_remove_company(args: argparse.Namespace, db: Database) -> None:
    companies.remove(db, args.handle)
    _print({"deleted": args.handle})


def cmd_jobs(args: argparse.Namespace, db: Database) -> None:
    filters = _filters(
        title=args.title,
        minSalary=args.min_salary,
        hasEquity=True if args.has_equity else None,
    )
    _check(validate_job_filter(filters))
    _print(jobs.find_all(db, filters))


def cmd_job(args: argparse.Namespace, db: Database) -> None:
    _print(jobs.get(db, args.id))


def cmd_create_job(args: argparse.Namespace, db: Database) -> None:
    data = _load_json(args.input)
    _check(validate_job_new(data))
    _print(jobs.create(db, data))


def cmd_update_job(args: argparse.Namespace, db: Database) -> None:
    data = _load_json(args.input)
    _check(validate_job_update(data))
    _print(jobs.update(db, args.id, data))


def cmd_remove_job(args: argparse.Namespace, db: Database) -> None:
    jobs.remove(db, args.id)
    _print({"deleted": args.id})


def run(func: Callable[[argparse.Namespace, Database], None], args: argparse.Namespace) -> None:
    db = _open_db(args)
    try:
        func(args, db)
    except JoblyError as e:
        get_logger().record_error(type(e).__name__)
        print(f"Error ({e.status}): {e.message}")
        raise SystemExit(2)
    finally:
        db.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobly", description="Jobly companies and jobs store")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--database", help="SQLAlchemy database URL (default: JOBLY_DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command")
    init = subparsers.add_parser("init-db", help="Create the companies and jobs tables")
    init.set_defaults(func=cmd_init_db)

    lsc = subparsers.add_parser("companies", help="List companies, optionally filtered")
    lsc.add_argument("--name", help="Case-insensitive substring of the company name")
    lsc.add_argument("--min-employees", type=int, help="Minimum number of employees (inclusive)")
    lsc.add_argument("--max-employees", type=int, help="Maximum number of employees (inclusive)")
    lsc.set_defaults(func=cmd_companies)

    shc = subparsers.add_parser("company", help="Show a company and its jobs")
    shc.add_argument("--handle", required=True, help="Company handle")
    shc.set_defaults(func=cmd_company)

    crc = subparsers.add_parser("create-company", help="Create a company from a JSON file")
    crc.add_argument("--input", required=True, help="Path to company JSON")
    crc.set_defaults(func=cmd_create_company)

    upc = subparsers.add_parser("update-company", help="Partially update a company from a JSON file")
    upc.add_argument("--handle", required=True, help="Company handle")
    upc.add_argument("--input", required=True, help="Path to JSON with the fields to change")
    upc.set_defaults(func=cmd_update_company)

    rmc = subparsers.add_parser("remove-company", help="Delete a company and its jobs")
    rmc.add_argument("--handle", required=True, help="Company handle")
    rmc.set_defaults(func=cmd_remove_company)

    lsj = subparsers.add_parser("jobs", help="List jobs, optionally filtered")
    lsj.add_argument("--title", help="Case-insensitive substring of the job title")
    lsj.add_argument("--min-salary", type=int, help="Minimum salary (inclusive)")
    lsj.add_argument("--has-equity", action="store_true", help="Only jobs with non-zero equity")
    lsj.set_defaults(func=cmd_jobs)

    shj = subparsers.add_parser("job", help="Show a job and its company")
    shj.add_argument("--id", type=int, required=True, help="Job id")
    shj.set_defaults(func=cmd_job)

    crj = subparsers.add_parser("create-job", help="Create a job from a JSON file")
    crj.add_argument("--input", required=True, help="Path to job JSON")
    crj.set_defaults(func=cmd_create_job)

    upj = subparsers.add_parser("update-job", help="Partially update a job from a JSON file")
    upj.add_argument("--id", type=int, required=True, help="Job id")
    upj.add_argument("--input", required=True, help="Path to JSON with the fields to change")
    upj.set_defaults(func=cmd_update_job)

    rmj = subparsers.add_parser("remove-job", help="Delete a job")
    rmj.add_argument("--id", type=int, required=True, help="Job id")
    rmj.set_defaults(func=cmd_remove_job)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (JOBLY_DATABASE_URL, JOBLY_LOG_LEVEL, etc.)
    env.load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        run(args.func, args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
