"""
Pytest configuration and shared fixtures.
"""

import json
import pytest
from pathlib import Path
from typing import Dict, Any, List

from jobly.database import Database, init_database
from jobly.logger import get_logger, reset_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh global logger per test, no console or file output."""
    reset_logger()
    logger = get_logger(enable_console=False, enable_file=False)
    yield logger
    reset_logger()


@pytest.fixture
def empty_db(tmp_path) -> Database:
    """Initialized database with no rows."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    init_database(db)
    yield db
    db.close()


@pytest.fixture
def db(empty_db) -> Database:
    """Database seeded with companies c1..c3; c1 owns jobs j1..j4."""
    for n in (1, 2, 3):
        empty_db.query(
            """INSERT INTO companies (handle, name, description, num_employees, logo_url)
               VALUES ($1, $2, $3, $4, $5)""",
            [f"c{n}", f"C{n}", f"Desc{n}", n, f"http://c{n}.img"],
        )
    for title, salary, equity in (
        ("Job1", 100, "0.1"),
        ("Job2", 200, "0.2"),
        ("Job3", 300, "0"),
        ("Job4", None, None),
    ):
        empty_db.query(
            """INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)""",
            [title, salary, equity, "c1"],
        )
    return empty_db


@pytest.fixture
def job_ids(db) -> List[int]:
    """Ids of j1..j4 in title order."""
    result = db.query("SELECT id FROM jobs ORDER BY title")
    return [row["id"] for row in result.rows]


@pytest.fixture
def new_company() -> Dict[str, Any]:
    """Valid company payload."""
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }


@pytest.fixture
def new_job() -> Dict[str, Any]:
    """Valid job payload for company c1."""
    return {
        "title": "Test",
        "salary": 10,
        "equity": "0.1",
        "companyHandle": "c1",
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a payload to a JSON file and return its path."""
    def _write(payload: Dict[str, Any], name: str = "payload.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload))
        return path
    return _write
