#!/usr/bin/env python3
"""
Load companies and jobs from a JSON fixture into the database.

Fixture shape: {"companies": [{handle, name, ...}], "jobs": [{title, companyHandle, ...}]}

Usage:
    python scripts/seed_db.py --json data/seed.json --database sqlite:///data/jobly.db
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from jobly import env
from jobly.database import Database, init_database
from jobly.errors import BadRequestError
from jobly.logger import get_logger
from jobly.repositories import companies, jobs
from jobly.schema import validate_company_new, validate_job_new


def seed(data: Dict[str, Any], db: Optional[Database], dry_run: bool = False) -> Dict[str, int]:
    """
    Insert fixture records through the repositories.

    Args:
        data: Parsed fixture
        db: Database handle (unused on dry runs)
        dry_run: If True, only report what would be loaded

    Returns:
        Counts: {"companies": n, "jobs": n, "skipped": n, "invalid": n}
    """
    company_rows = data.get("companies", [])
    job_rows = data.get("jobs", [])
    print(f"Found {len(company_rows)} companies and {len(job_rows)} jobs")

    counts = {"companies": 0, "jobs": 0, "skipped": 0, "invalid": 0}

    if dry_run:
        print("\n[DRY RUN] Would load the following companies:")
        for i, company in enumerate(company_rows[:5], 1):
            print(f"  {i}. {company.get('handle')}: {company.get('name')}")
        if len(company_rows) > 5:
            print(f"  ... and {len(company_rows) - 5} more")
        return counts

    init_database(db)

    for company in company_rows:
        errors = validate_company_new(company)
        if errors:
            print(f"Skipping company {company.get('handle')}: {'; '.join(errors)}")
            counts["invalid"] += 1
            continue
        try:
            companies.create(db, company)
            counts["companies"] += 1
        except BadRequestError as e:
            print(f"Skipping company: {e.message}")
            counts["skipped"] += 1

    for job in job_rows:
        errors = validate_job_new(job)
        if errors:
            print(f"Skipping job {job.get('title')}: {'; '.join(errors)}")
            counts["invalid"] += 1
            continue
        try:
            jobs.create(db, job)
            counts["jobs"] += 1
        except BadRequestError as e:
            print(f"Skipping job {job.get('title')}: {e.message}")
            counts["skipped"] += 1

    print("\nSeed complete!")
    print(f"   Companies: {counts['companies']}")
    print(f"   Jobs:      {counts['jobs']}")
    print(f"   Skipped:   {counts['skipped']}")
    print(f"   Invalid:   {counts['invalid']}")
    get_logger().log_metrics_summary()
    return counts


def main():
    env.load_env()
    parser = argparse.ArgumentParser(description="Load companies and jobs from a JSON fixture")
    parser.add_argument("--json", type=Path, default=Path("data/seed.json"),
                        help="Path to JSON fixture")
    parser.add_argument("--database", help="SQLAlchemy database URL (default: JOBLY_DATABASE_URL)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be loaded without writing")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"JSON file not found: {args.json}")
        sys.exit(1)

    with args.json.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if args.dry_run:
        seed(data, None, dry_run=True)
        return

    db = Database(args.database or env.get_database_url(), echo=env.echo_sql())
    try:
        seed(data, db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
