"""Comment data access.

Comment reads carry `total_likes`/`total_dislikes` aggregated from the
comment's evaluations. Deleting comments always removes their evaluations
first, in the same transaction, because evaluations reference the comment
through its composite key.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from cinerate.db.base import Database

_SELECT = """
    SELECT c.comment_id, c.profile_id, c.film_id, c.body,
           p.name AS author_name,
           COALESCE(SUM(CASE WHEN ce.positive THEN 1 ELSE 0 END), 0) AS total_likes,
           COALESCE(SUM(CASE WHEN ce.negative THEN 1 ELSE 0 END), 0) AS total_dislikes
    FROM comment c
    JOIN profile p ON p.profile_id = c.profile_id
    LEFT JOIN comment_evaluation ce
           ON ce.comment_id = c.comment_id
          AND ce.comment_profile_id = c.profile_id
          AND ce.comment_film_id = c.film_id
"""
_GROUP = " GROUP BY c.comment_id, c.profile_id, c.film_id, c.body, p.name ORDER BY c.comment_id"


def _shape(row: Dict[str, Any]) -> Dict[str, Any]:
    row["total_likes"] = int(row.get("total_likes") or 0)
    row["total_dislikes"] = int(row.get("total_dislikes") or 0)
    return row


def list_comments(
    db: Database,
    profile_id: Optional[int] = None,
    film_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    clauses: List[str] = []
    params: Dict[str, Any] = {}
    if profile_id is not None:
        clauses.append("c.profile_id = :profile_id")
        params["profile_id"] = int(profile_id)
    if film_id is not None:
        clauses.append("c.film_id = :film_id")
        params["film_id"] = int(film_id)
    where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
    return [_shape(r) for r in db.fetch_all(_SELECT + where + _GROUP, params)]


def get_comment(db: Database, comment_id: int) -> Optional[Dict[str, Any]]:
    rows = db.fetch_all(_SELECT + " WHERE c.comment_id = :id" + _GROUP, {"id": int(comment_id)})
    return _shape(rows[0]) if rows else None


def create_comment(db: Database, profile_id: int, film_id: int, body: str) -> Optional[int]:
    result = db.execute(
        "INSERT INTO comment (profile_id, film_id, body) VALUES (:profile_id, :film_id, :body) RETURNING comment_id",
        {"profile_id": int(profile_id), "film_id": int(film_id), "body": body},
    )
    return result.inserted_id


def update_comment(db: Database, comment_id: int, body: str, owner_id: Optional[int] = None) -> int:
    params: Dict[str, Any] = {"id": int(comment_id), "body": body}
    sql = "UPDATE comment SET body = :body WHERE comment_id = :id"
    if owner_id is not None:
        sql += " AND profile_id = :owner_id"
        params["owner_id"] = int(owner_id)
    return db.execute(sql, params).rowcount


def delete_comment(db: Database, comment_id: int, owner_id: Optional[int] = None) -> int:
    """Delete one comment (scoped to `owner_id` when given) with its evaluations."""
    params: Dict[str, Any] = {"id": int(comment_id)}
    scope = ""
    if owner_id is not None:
        scope = " AND profile_id = :owner_id"
        params["owner_id"] = int(owner_id)
    with db.transaction() as tx:
        tx.execute(
            "DELETE FROM comment_evaluation WHERE comment_id IN "
            f"(SELECT comment_id FROM comment WHERE comment_id = :id{scope})",
            params,
        )
        result = tx.execute(f"DELETE FROM comment WHERE comment_id = :id{scope}", params)
    return result.rowcount


def delete_film_comments(db: Database, film_id: int) -> int:
    """Delete every comment on `film_id` with their evaluations; returns comments removed."""
    params = {"film_id": int(film_id)}
    with db.transaction() as tx:
        tx.execute("DELETE FROM comment_evaluation WHERE comment_film_id = :film_id", params)
        result = tx.execute("DELETE FROM comment WHERE film_id = :film_id", params)
    return result.rowcount


__all__ = [
    "list_comments",
    "get_comment",
    "create_comment",
    "update_comment",
    "delete_comment",
    "delete_film_comments",
]
