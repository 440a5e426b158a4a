"""Cascading deletion of a profile and everything that references it.

The store declares foreign keys without ON DELETE actions, so dependents are
removed explicitly, children before parents, inside one transaction. Any
failure rolls the whole unit back and propagates to the caller; nothing is
left half-deleted.

Authorization is the caller's job: routes only reach this module for the
authenticated profile itself or for an admin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

from cinerate.db.base import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeStep:
    name: str
    sql: str


# Order matters: comment evaluations go before comments (composite reference),
# suggestion evaluations before suggestions, and the profile row last.
CASCADE_STEPS: Tuple[CascadeStep, ...] = (
    CascadeStep(
        "comment_evaluation",
        """
        DELETE FROM comment_evaluation
        WHERE profile_id = :profile_id
           OR EXISTS (
                SELECT 1 FROM comment c
                WHERE c.comment_id = comment_evaluation.comment_id
                  AND c.profile_id = comment_evaluation.comment_profile_id
                  AND c.film_id = comment_evaluation.comment_film_id
                  AND c.profile_id = :profile_id
           )
        """,
    ),
    CascadeStep(
        "film_suggestion_evaluation",
        """
        DELETE FROM film_suggestion_evaluation
        WHERE profile_id = :profile_id
           OR suggestion_id IN (SELECT suggestion_id FROM film_suggestion WHERE profile_id = :profile_id)
        """,
    ),
    CascadeStep(
        "actor_suggestion_evaluation",
        """
        DELETE FROM actor_suggestion_evaluation
        WHERE profile_id = :profile_id
           OR suggestion_id IN (SELECT suggestion_id FROM actor_suggestion WHERE profile_id = :profile_id)
        """,
    ),
    CascadeStep("film_evaluation", "DELETE FROM film_evaluation WHERE profile_id = :profile_id"),
    CascadeStep("actor_evaluation", "DELETE FROM actor_evaluation WHERE profile_id = :profile_id"),
    CascadeStep("favorite_film", "DELETE FROM favorite_film WHERE profile_id = :profile_id"),
    CascadeStep("favorite_actor", "DELETE FROM favorite_actor WHERE profile_id = :profile_id"),
    CascadeStep("film_suggestion", "DELETE FROM film_suggestion WHERE profile_id = :profile_id"),
    CascadeStep("actor_suggestion", "DELETE FROM actor_suggestion WHERE profile_id = :profile_id"),
    CascadeStep("comment", "DELETE FROM comment WHERE profile_id = :profile_id"),
    CascadeStep("profile", "DELETE FROM profile WHERE profile_id = :profile_id"),
)


@dataclass
class CascadeDeletionResult:
    """Outcome of a committed cascade.

    Attributes:
        profile_id: The profile that was targeted.
        rows_deleted: Rows removed per step, keyed by step name.
    """

    profile_id: int
    rows_deleted: Dict[str, int] = field(default_factory=dict)

    @property
    def profile_deleted(self) -> int:
        return self.rows_deleted.get("profile", 0)

    @property
    def deleted(self) -> bool:
        return self.profile_deleted > 0

    @property
    def dependents_deleted(self) -> int:
        return sum(n for name, n in self.rows_deleted.items() if name != "profile")


def delete_profile_cascade(db: Database, profile_id: int) -> CascadeDeletionResult:
    """Delete `profile_id` and all of its dependent rows atomically.

    Returns the per-step counts; `result.deleted` is False when the profile
    did not exist (a repeated call is a harmless no-op). Storage failures
    propagate after rollback.
    """
    result = CascadeDeletionResult(profile_id=int(profile_id))
    params = {"profile_id": int(profile_id)}
    logger.info("profile_cascade_delete_start profile_id=%s", profile_id)

    with db.transaction() as tx:
        for step in CASCADE_STEPS:
            outcome = tx.execute(step.sql, params)
            result.rows_deleted[step.name] = outcome.rowcount

    logger.info(
        "profile_cascade_delete_done profile_id=%s deleted=%s counts=%s",
        profile_id,
        result.deleted,
        result.rows_deleted,
    )
    return result


__all__ = ["CascadeStep", "CASCADE_STEPS", "CascadeDeletionResult", "delete_profile_cascade"]
