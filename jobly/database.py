"""
Database schema and query execution.

Tables are declared with SQLAlchemy; repositories talk to the store through
``Database.query`` using parameterized SQL with ``$1..$n`` placeholders.
Works against PostgreSQL and SQLite.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Sequence

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base

from .logger import get_logger

Base = declarative_base()

_POSITIONAL = re.compile(r"\$(\d+)")
_ILIKE = re.compile(r"\bILIKE\b", re.IGNORECASE)


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, unique=True, nullable=False)
    description = Column(Text, nullable=False)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    logo_url = Column(Text)


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"))
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


class QueryResult(NamedTuple):
    """Rows returned by a statement, as plain dicts keyed by column label."""

    rows: List[Dict[str, Any]]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def bind_positional(sql: str, values: Sequence[Any]):
    """
    Convert ``$n`` placeholders to SQLAlchemy named binds.

    Args:
        sql: Statement text with 1-based ``$n`` placeholders
        values: Positional values; values[0] binds to $1

    Returns:
        Tuple of (statement text with ``:pn`` binds, bind parameter dict)
    """
    params = {f"p{i}": v for i, v in enumerate(values, start=1)}
    return _POSITIONAL.sub(r":p\1", sql), params


class Database:
    """
    Query-execution handle passed into every repository operation.

    Each ``query`` call runs in its own transaction.
    """

    def __init__(self, url: str, echo: bool = False):
        """
        Args:
            url: SQLAlchemy database URL
            echo: Echo SQL statements through SQLAlchemy's logger
        """
        self.url = url
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(url, echo=echo)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    def query(self, sql: str, values: Sequence[Any] = ()) -> QueryResult:
        """
        Execute one parameterized statement.

        Args:
            sql: Statement text using ``$1..$n`` placeholders
            values: Positional values bound in order

        Returns:
            QueryResult with the returned rows (empty for statements without rows)
        """
        if self.is_sqlite:
            # SQLite LIKE is already case-insensitive for ASCII
            sql = _ILIKE.sub("LIKE", sql)
        statement, params = bind_positional(sql, values)

        logger = get_logger()
        logger.record_query()
        logger.debug("Executing statement", sql=" ".join(statement.split()), params=params)

        with self.engine.begin() as conn:
            result = conn.execute(text(statement), params)
            if not result.returns_rows:
                return QueryResult(rows=[])
            return QueryResult(rows=[dict(row) for row in result.mappings()])

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


def init_database(db: Database) -> None:
    """
    Create tables if they do not exist.

    Args:
        db: Database handle
    """
    Base.metadata.create_all(db.engine)
    get_logger().info("Database initialized", url=db.engine.url.render_as_string(hide_password=True))
