"""Like/dislike evaluations for the five evaluable kinds.

Each kind is described by an `EvaluationKind`; all kinds share the same row
shape (`evaluation_id, profile_id, target_id, positive, negative`). Comment
evaluations additionally store the comment's author and film so the row
references the comment through its composite key; those two values are
resolved here from the comment row and never taken from the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cinerate.db.base import Database


@dataclass(frozen=True)
class EvaluationKind:
    slug: str
    table: str
    target_column: str
    target_table: str
    target_pk: str
    label: str
    composite: bool = False

    @property
    def not_found_code(self) -> str:
        return f"{self.label}_NOT_FOUND"


FILM_SUGGESTION_EVALUATION = EvaluationKind(
    slug="film-suggestion",
    table="film_suggestion_evaluation",
    target_column="suggestion_id",
    target_table="film_suggestion",
    target_pk="suggestion_id",
    label="FILM_SUGGESTION",
)
ACTOR_SUGGESTION_EVALUATION = EvaluationKind(
    slug="actor-suggestion",
    table="actor_suggestion_evaluation",
    target_column="suggestion_id",
    target_table="actor_suggestion",
    target_pk="suggestion_id",
    label="ACTOR_SUGGESTION",
)
FILM_EVALUATION = EvaluationKind(
    slug="film",
    table="film_evaluation",
    target_column="film_id",
    target_table="film",
    target_pk="film_id",
    label="FILM",
)
ACTOR_EVALUATION = EvaluationKind(
    slug="actor",
    table="actor_evaluation",
    target_column="actor_id",
    target_table="actor",
    target_pk="actor_id",
    label="ACTOR",
)
COMMENT_EVALUATION = EvaluationKind(
    slug="comment",
    table="comment_evaluation",
    target_column="comment_id",
    target_table="comment",
    target_pk="comment_id",
    label="COMMENT",
    composite=True,
)

EVALUATION_KINDS = (
    FILM_SUGGESTION_EVALUATION,
    ACTOR_SUGGESTION_EVALUATION,
    FILM_EVALUATION,
    ACTOR_EVALUATION,
    COMMENT_EVALUATION,
)


def _shape(row: Dict[str, Any]) -> Dict[str, Any]:
    row["positive"] = bool(row.get("positive"))
    row["negative"] = bool(row.get("negative"))
    return row


def _select(kind: EvaluationKind) -> str:
    return (
        f"SELECT evaluation_id, profile_id, {kind.target_column} AS target_id, positive, negative "
        f"FROM {kind.table}"
    )


def resolve_target(db: Database, kind: EvaluationKind, target_id: int) -> Optional[Dict[str, Any]]:
    """Return the columns an evaluation row needs for `target_id`, or None when absent."""
    if kind.composite:
        row = db.fetch_one(
            "SELECT comment_id, profile_id, film_id FROM comment WHERE comment_id = :id",
            {"id": int(target_id)},
        )
        if row is None:
            return None
        return {
            "comment_id": row["comment_id"],
            "comment_profile_id": row["profile_id"],
            "comment_film_id": row["film_id"],
        }
    row = db.fetch_one(
        f"SELECT {kind.target_pk} FROM {kind.target_table} WHERE {kind.target_pk} = :id",
        {"id": int(target_id)},
    )
    if row is None:
        return None
    return {kind.target_column: row[kind.target_pk]}


def has_evaluated(db: Database, kind: EvaluationKind, profile_id: int, target_id: int) -> bool:
    row = db.fetch_one(
        f"SELECT evaluation_id FROM {kind.table} "
        f"WHERE profile_id = :profile_id AND {kind.target_column} = :target_id",
        {"profile_id": int(profile_id), "target_id": int(target_id)},
    )
    return row is not None


def create_evaluation(
    db: Database,
    kind: EvaluationKind,
    profile_id: int,
    target: Dict[str, Any],
    positive: bool,
    negative: bool,
) -> Optional[int]:
    """Insert an evaluation; `target` is the mapping returned by `resolve_target`."""
    params: Dict[str, Any] = dict(target)
    params.update({"profile_id": int(profile_id), "positive": bool(positive), "negative": bool(negative)})
    cols = ["profile_id"] + list(target.keys()) + ["positive", "negative"]
    result = db.execute(
        f"INSERT INTO {kind.table} ({', '.join(cols)}) "
        f"VALUES ({', '.join(':' + c for c in cols)}) RETURNING evaluation_id",
        params,
    )
    return result.inserted_id


def list_evaluations(
    db: Database,
    kind: EvaluationKind,
    target_id: Optional[int] = None,
    profile_id: Optional[int] = None,
    polarity: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """List evaluations, optionally narrowed by target, author and polarity ("likes"/"dislikes")."""
    clauses: List[str] = []
    params: Dict[str, Any] = {}
    if target_id is not None:
        clauses.append(f"{kind.target_column} = :target_id")
        params["target_id"] = int(target_id)
    if profile_id is not None:
        clauses.append("profile_id = :profile_id")
        params["profile_id"] = int(profile_id)
    if polarity == "likes":
        clauses.append("positive = :flag")
        params["flag"] = True
    elif polarity == "dislikes":
        clauses.append("negative = :flag")
        params["flag"] = True
    sql = _select(kind)
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY evaluation_id"
    return [_shape(r) for r in db.fetch_all(sql, params)]


def get_evaluation(db: Database, kind: EvaluationKind, evaluation_id: int) -> Optional[Dict[str, Any]]:
    row = db.fetch_one(_select(kind) + " WHERE evaluation_id = :id", {"id": int(evaluation_id)})
    return _shape(row) if row is not None else None


def update_evaluation(
    db: Database,
    kind: EvaluationKind,
    evaluation_id: int,
    positive: bool,
    negative: bool,
    owner_id: Optional[int] = None,
) -> int:
    params: Dict[str, Any] = {"id": int(evaluation_id), "positive": bool(positive), "negative": bool(negative)}
    sql = f"UPDATE {kind.table} SET positive = :positive, negative = :negative WHERE evaluation_id = :id"
    if owner_id is not None:
        sql += " AND profile_id = :owner_id"
        params["owner_id"] = int(owner_id)
    return db.execute(sql, params).rowcount


def delete_evaluation(db: Database, kind: EvaluationKind, evaluation_id: int, owner_id: Optional[int] = None) -> int:
    params: Dict[str, Any] = {"id": int(evaluation_id)}
    sql = f"DELETE FROM {kind.table} WHERE evaluation_id = :id"
    if owner_id is not None:
        sql += " AND profile_id = :owner_id"
        params["owner_id"] = int(owner_id)
    return db.execute(sql, params).rowcount


__all__ = [
    "EvaluationKind",
    "EVALUATION_KINDS",
    "FILM_SUGGESTION_EVALUATION",
    "ACTOR_SUGGESTION_EVALUATION",
    "FILM_EVALUATION",
    "ACTOR_EVALUATION",
    "COMMENT_EVALUATION",
    "resolve_target",
    "has_evaluated",
    "create_evaluation",
    "list_evaluations",
    "get_evaluation",
    "update_evaluation",
    "delete_evaluation",
]
