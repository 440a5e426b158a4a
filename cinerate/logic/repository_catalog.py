"""Catalog data access (films, actors, directors, producers, genres).

The catalog tables share one set of helpers driven by a small descriptor, so
routes and other repositories can ask "does film 3 exist" or "is there an
actor called X" without repeating SQL.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cinerate.db.base import Database


@dataclass(frozen=True)
class CatalogResource:
    table: str
    pk: str
    columns: Tuple[str, ...]
    label: str
    bool_columns: Tuple[str, ...] = ()
    unique_name: bool = False

    @property
    def not_found_code(self) -> str:
        return f"{self.label}_NOT_FOUND"

    @property
    def in_use_code(self) -> str:
        return f"{self.label}_IN_USE"

    @property
    def select_list(self) -> str:
        return ", ".join((self.pk,) + self.columns)


FILM = CatalogResource(
    table="film",
    pk="film_id",
    columns=("name", "release_date", "synopsis", "age_rating"),
    label="FILM",
)
ACTOR = CatalogResource(
    table="actor",
    pk="actor_id",
    columns=("name", "birth_date", "alive"),
    label="ACTOR",
    bool_columns=("alive",),
)
DIRECTOR = CatalogResource(
    table="director", pk="director_id", columns=("name",), label="DIRECTOR", unique_name=True
)
PRODUCER = CatalogResource(
    table="producer", pk="producer_id", columns=("name",), label="PRODUCER", unique_name=True
)
GENRE = CatalogResource(table="genre", pk="genre_id", columns=("name",), label="GENRE", unique_name=True)


def _shape(resource: CatalogResource, row: Dict[str, Any]) -> Dict[str, Any]:
    for col in resource.bool_columns:
        if row.get(col) is not None:
            row[col] = bool(row[col])
    return row


def list_rows(db: Database, resource: CatalogResource, name: Optional[str] = None) -> List[Dict[str, Any]]:
    sql = f"SELECT {resource.select_list} FROM {resource.table}"
    params: Dict[str, Any] = {}
    if name:
        sql += " WHERE name LIKE :pattern"
        params["pattern"] = f"%{name}%"
    sql += f" ORDER BY {resource.pk}"
    return [_shape(resource, r) for r in db.fetch_all(sql, params)]


def get_row(db: Database, resource: CatalogResource, row_id: int) -> Optional[Dict[str, Any]]:
    row = db.fetch_one(
        f"SELECT {resource.select_list} FROM {resource.table} WHERE {resource.pk} = :id",
        {"id": int(row_id)},
    )
    return _shape(resource, row) if row is not None else None


def exists(db: Database, resource: CatalogResource, row_id: int) -> bool:
    row = db.fetch_one(
        f"SELECT 1 AS present FROM {resource.table} WHERE {resource.pk} = :id",
        {"id": int(row_id)},
    )
    return row is not None


def name_exists(db: Database, resource: CatalogResource, name: str, exclude_id: Optional[int] = None) -> bool:
    """Exact-name lookup; `exclude_id` skips the row being renamed."""
    sql = f"SELECT 1 AS present FROM {resource.table} WHERE name = :name"
    params: Dict[str, Any] = {"name": name}
    if exclude_id is not None:
        sql += f" AND {resource.pk} <> :exclude_id"
        params["exclude_id"] = int(exclude_id)
    return db.fetch_one(sql, params) is not None


def create_row(db: Database, resource: CatalogResource, values: Mapping[str, Any]) -> Optional[int]:
    cols = [c for c in resource.columns if c in values]
    placeholders = ", ".join(f":{c}" for c in cols)
    result = db.execute(
        f"INSERT INTO {resource.table} ({', '.join(cols)}) VALUES ({placeholders}) RETURNING {resource.pk}",
        {c: values[c] for c in cols},
    )
    return result.inserted_id


def update_row(db: Database, resource: CatalogResource, row_id: int, values: Mapping[str, Any]) -> int:
    """Set the given columns on one row and return the affected row count."""
    cols = [c for c in resource.columns if c in values]
    if not cols:
        return 0
    params: Dict[str, Any] = {c: values[c] for c in cols}
    params["id"] = int(row_id)
    assignments = ", ".join(f"{c} = :{c}" for c in cols)
    return db.execute(f"UPDATE {resource.table} SET {assignments} WHERE {resource.pk} = :id", params).rowcount


def delete_row(db: Database, resource: CatalogResource, row_id: int) -> int:
    """Delete one catalog row; a row still referenced raises ConflictError."""
    result = db.execute(
        f"DELETE FROM {resource.table} WHERE {resource.pk} = :id",
        {"id": int(row_id)},
    )
    return result.rowcount


__all__ = [
    "CatalogResource",
    "FILM",
    "ACTOR",
    "DIRECTOR",
    "PRODUCER",
    "GENRE",
    "list_rows",
    "get_row",
    "exists",
    "name_exists",
    "create_row",
    "update_row",
    "delete_row",
]
