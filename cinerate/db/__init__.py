"""Database bootstrap utilities for the CineRate API.

This module exposes convenience imports for engine construction, the
injectable `Database` handle and the migrations runner that applies SQL files
from the package's migrations/ directory. The DB layer does not leak ORM
models into route handlers.
"""

from cinerate.db.base import Database, StatementResult, Transaction, create_database_engine, get_database
from cinerate.db.migrations_runner import apply_migrations

__all__ = [
    "Database",
    "StatementResult",
    "Transaction",
    "create_database_engine",
    "get_database",
    "apply_migrations",
]
