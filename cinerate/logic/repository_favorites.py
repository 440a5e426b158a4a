"""Favorite films and actors.

A favorite is the pair (profile, target) stored under a composite primary
key; there is no surrogate id, so row-scoped deletes bind both halves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cinerate.db.base import Database
from cinerate.logic.repository_catalog import ACTOR, FILM, CatalogResource


@dataclass(frozen=True)
class FavoriteKind:
    table: str
    target_column: str
    catalog: CatalogResource


FAVORITE_FILM = FavoriteKind(table="favorite_film", target_column="film_id", catalog=FILM)
FAVORITE_ACTOR = FavoriteKind(table="favorite_actor", target_column="actor_id", catalog=ACTOR)


def _select(kind: FavoriteKind) -> str:
    cat = kind.catalog
    return (
        f"SELECT f.profile_id, f.{kind.target_column} AS target_id, t.name AS target_name "
        f"FROM {kind.table} f JOIN {cat.table} t ON t.{cat.pk} = f.{kind.target_column}"
    )


def list_favorites(
    db: Database,
    kind: FavoriteKind,
    profile_id: Optional[int] = None,
    target_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    clauses: List[str] = []
    params: Dict[str, Any] = {}
    if profile_id is not None:
        clauses.append("f.profile_id = :profile_id")
        params["profile_id"] = int(profile_id)
    if target_id is not None:
        clauses.append(f"f.{kind.target_column} = :target_id")
        params["target_id"] = int(target_id)
    sql = _select(kind)
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += f" ORDER BY f.profile_id, f.{kind.target_column}"
    return db.fetch_all(sql, params)


def favorite_exists(db: Database, kind: FavoriteKind, profile_id: int, target_id: int) -> bool:
    row = db.fetch_one(
        f"SELECT 1 AS present FROM {kind.table} WHERE profile_id = :profile_id AND {kind.target_column} = :target_id",
        {"profile_id": int(profile_id), "target_id": int(target_id)},
    )
    return row is not None


def add_favorite(db: Database, kind: FavoriteKind, profile_id: int, target_id: int) -> int:
    result = db.execute(
        f"INSERT INTO {kind.table} (profile_id, {kind.target_column}) VALUES (:profile_id, :target_id)",
        {"profile_id": int(profile_id), "target_id": int(target_id)},
    )
    return result.rowcount


def remove_favorite(db: Database, kind: FavoriteKind, profile_id: int, target_id: int) -> int:
    result = db.execute(
        f"DELETE FROM {kind.table} WHERE profile_id = :profile_id AND {kind.target_column} = :target_id",
        {"profile_id": int(profile_id), "target_id": int(target_id)},
    )
    return result.rowcount


def remove_profile_favorites(db: Database, kind: FavoriteKind, profile_id: int) -> int:
    result = db.execute(
        f"DELETE FROM {kind.table} WHERE profile_id = :profile_id",
        {"profile_id": int(profile_id)},
    )
    return result.rowcount


def remove_target_favorites(db: Database, kind: FavoriteKind, target_id: int) -> int:
    result = db.execute(
        f"DELETE FROM {kind.table} WHERE {kind.target_column} = :target_id",
        {"target_id": int(target_id)},
    )
    return result.rowcount


__all__ = [
    "FavoriteKind",
    "FAVORITE_FILM",
    "FAVORITE_ACTOR",
    "list_favorites",
    "favorite_exists",
    "add_favorite",
    "remove_favorite",
    "remove_profile_favorites",
    "remove_target_favorites",
]
