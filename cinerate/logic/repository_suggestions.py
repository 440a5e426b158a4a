"""Film and actor suggestion data access.

Suggestions are owned rows. Mutating helpers accept an optional `owner_id`:
when given, it is bound into the WHERE clause so a non-owner matches nothing
(the caller reports not found); when omitted the statement is unscoped and
is only reachable from admin endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cinerate.db.base import Database
from cinerate.logic.repository_catalog import ACTOR, FILM, CatalogResource


@dataclass(frozen=True)
class SuggestionKind:
    table: str
    evaluation_table: str
    columns: Tuple[str, ...]
    catalog: CatalogResource
    label: str

    @property
    def not_found_code(self) -> str:
        return f"{self.label}_NOT_FOUND"


FILM_SUGGESTION = SuggestionKind(
    table="film_suggestion",
    evaluation_table="film_suggestion_evaluation",
    columns=("name", "synopsis"),
    catalog=FILM,
    label="FILM_SUGGESTION",
)
ACTOR_SUGGESTION = SuggestionKind(
    table="actor_suggestion",
    evaluation_table="actor_suggestion_evaluation",
    columns=("name",),
    catalog=ACTOR,
    label="ACTOR_SUGGESTION",
)


def _select(kind: SuggestionKind) -> str:
    cols = ", ".join(f"s.{c}" for c in kind.columns)
    return (
        f"SELECT s.suggestion_id, s.profile_id, {cols}, "
        f"p.name AS author_name, p.email AS author_email "
        f"FROM {kind.table} s JOIN profile p ON p.profile_id = s.profile_id"
    )


def _scope(owner_id: Optional[int], params: Dict[str, Any]) -> str:
    if owner_id is None:
        return ""
    params["owner_id"] = int(owner_id)
    return " AND profile_id = :owner_id"


def list_suggestions(db: Database, kind: SuggestionKind, name: Optional[str] = None) -> List[Dict[str, Any]]:
    if name:
        return db.fetch_all(
            _select(kind) + " WHERE s.name LIKE :pattern ORDER BY s.suggestion_id",
            {"pattern": f"%{name}%"},
        )
    return db.fetch_all(_select(kind) + " ORDER BY s.suggestion_id")


def get_suggestion(db: Database, kind: SuggestionKind, suggestion_id: int) -> Optional[Dict[str, Any]]:
    return db.fetch_one(_select(kind) + " WHERE s.suggestion_id = :id", {"id": int(suggestion_id)})


def create_suggestion(db: Database, kind: SuggestionKind, profile_id: int, values: Mapping[str, Any]) -> Optional[int]:
    cols = [c for c in kind.columns if c in values]
    params = {c: values[c] for c in cols}
    params["profile_id"] = int(profile_id)
    col_list = ", ".join(["profile_id"] + cols)
    placeholders = ", ".join(f":{c}" for c in ["profile_id"] + cols)
    result = db.execute(
        f"INSERT INTO {kind.table} ({col_list}) VALUES ({placeholders}) RETURNING suggestion_id",
        params,
    )
    return result.inserted_id


def update_suggestion(
    db: Database,
    kind: SuggestionKind,
    suggestion_id: int,
    values: Mapping[str, Any],
    owner_id: Optional[int] = None,
) -> int:
    cols = [c for c in kind.columns if c in values]
    if not cols:
        return 0
    params: Dict[str, Any] = {c: values[c] for c in cols}
    params["id"] = int(suggestion_id)
    assignments = ", ".join(f"{c} = :{c}" for c in cols)
    sql = f"UPDATE {kind.table} SET {assignments} WHERE suggestion_id = :id" + _scope(owner_id, params)
    return db.execute(sql, params).rowcount


def delete_suggestion(db: Database, kind: SuggestionKind, suggestion_id: int, owner_id: Optional[int] = None) -> int:
    """Delete a suggestion and the evaluations that target it in one transaction.

    Returns the number of suggestion rows removed (0 when absent or not owned).
    """
    params: Dict[str, Any] = {"id": int(suggestion_id)}
    scope = _scope(owner_id, params)
    with db.transaction() as tx:
        tx.execute(
            f"DELETE FROM {kind.evaluation_table} WHERE suggestion_id IN "
            f"(SELECT suggestion_id FROM {kind.table} WHERE suggestion_id = :id{scope})",
            params,
        )
        result = tx.execute(f"DELETE FROM {kind.table} WHERE suggestion_id = :id{scope}", params)
    return result.rowcount


__all__ = [
    "SuggestionKind",
    "FILM_SUGGESTION",
    "ACTOR_SUGGESTION",
    "list_suggestions",
    "get_suggestion",
    "create_suggestion",
    "update_suggestion",
    "delete_suggestion",
]
