"""SQLAlchemy engine and the injectable `Database` handle.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. No declarative models are defined here; repositories
issue parameterized `text()` statements through a `Database` built once by
the application factory and handed to routes via `get_database`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from cinerate.logic.errors import ConflictError, StorageError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def create_database_engine(url: str, echo: bool = False) -> Engine:
    """Create a pooled Engine for `url`.

    For SQLite in-memory URLs, use a StaticPool to keep a single connection
    alive across sessions and threads during tests. SQLite connections get
    foreign key enforcement switched on so dependents must be removed first.
    """
    kwargs: dict = {"future": True, "pool_pre_ping": True, "echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@dataclass(frozen=True)
class StatementResult:
    """Outcome of one statement: affected rows plus any RETURNING rows."""

    rowcount: int
    rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def inserted_id(self) -> Optional[int]:
        if not self.rows:
            return None
        first = next(iter(self.rows[0].values()), None)
        return int(first) if first is not None else None


def _run(conn: Connection, sql: str, params: Optional[Mapping[str, Any]]) -> StatementResult:
    result = conn.execute(sql_text(sql), dict(params or {}))
    rows: List[Dict[str, Any]] = []
    if result.returns_rows:
        rows = [dict(r) for r in result.mappings().all()]
    return StatementResult(rowcount=int(result.rowcount or 0), rows=rows)


def _translate(exc: SQLAlchemyError) -> Exception:
    detail = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, IntegrityError):
        return ConflictError("Operation conflicts with existing data.", code="CONFLICT", detail=detail)
    return StorageError("Failed to execute statement.", detail=detail)


class Transaction:
    """Statement runner bound to one open connection inside `Database.transaction()`."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> StatementResult:
        return _run(self._conn, sql, params)


class Database:
    """Handle over a pooled Engine.

    Every call acquires a connection and releases it on all exit paths. Single
    statements commit as their own unit of work; `transaction()` groups several
    statements into one atomic unit.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @property
    def dialect_name(self) -> str:
        return str(self.engine.dialect.name)

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> StatementResult:
        try:
            with self.engine.begin() as conn:
                return _run(conn, sql, params)
        except SQLAlchemyError as exc:
            logger.error("db_statement_failed sql=%s", " ".join(sql.split())[:120], exc_info=True)
            raise _translate(exc) from exc

    def fetch_all(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        try:
            with self.engine.connect() as conn:
                return _run(conn, sql, params).rows
        except SQLAlchemyError as exc:
            logger.error("db_query_failed sql=%s", " ".join(sql.split())[:120], exc_info=True)
            raise _translate(exc) from exc

    def fetch_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        try:
            with self.engine.begin() as conn:
                yield Transaction(conn)
        except SQLAlchemyError as exc:
            logger.error("db_transaction_rolled_back", exc_info=True)
            raise _translate(exc) from exc
        except Exception:
            logger.error("db_transaction_rolled_back", exc_info=True)
            raise

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the Database built by the app factory."""
    return request.app.state.database


__all__ = [
    "Database",
    "StatementResult",
    "Transaction",
    "create_database_engine",
    "get_database",
]
