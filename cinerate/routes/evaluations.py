"""Like/dislike routes, one router per evaluable kind.

Creation checks run in a fixed order: the flag rule (400), the target's
existence (404), then one evaluation per profile and target (409). Updates
must send both flags; a flag is a JSON boolean or the integer 0 or 1.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity, current_identity
from cinerate.logic.errors import ConflictError, NotFoundError, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.ownership import owner_scope
from cinerate.logic.repository_evaluations import (
    EVALUATION_KINDS,
    EvaluationKind,
    create_evaluation,
    delete_evaluation,
    get_evaluation,
    has_evaluated,
    list_evaluations,
    resolve_target,
    update_evaluation,
)
from cinerate.logic.validation import evaluation_flags, require_int

logger = logging.getLogger(__name__)


def build_evaluation_router(kind: EvaluationKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.slug}-evaluations")
    not_found = "Evaluation not found."
    target_missing = f"{kind.label.replace('_', ' ').capitalize()} not found."
    op = f"{kind.label}_EVALUATION"

    def _listing(db: Database, **filters) -> List[Dict]:
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch evaluations."):
            return list_evaluations(db, kind, **filters)

    @router.post("", status_code=201, summary="Like or dislike a target")
    def create(payload: dict, identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
        target_id = require_int(payload.get("target_id"), "target_id")
        positive, negative = evaluation_flags(payload)

        target = resolve_target(db, kind, target_id)
        if target is None:
            raise NotFoundError(target_missing, code=kind.not_found_code)
        if has_evaluated(db, kind, identity.profile_id, target_id):
            raise ConflictError("You have already evaluated this item.", code="EVALUATION_ALREADY_EXISTS")

        try:
            with storage_errors(f"ADD_{op}_ERROR", "Failed to create evaluation."):
                evaluation_id = create_evaluation(db, kind, identity.profile_id, target, positive, negative)
        except ConflictError as exc:
            # Lost a race against a concurrent insert for the same pair.
            raise ConflictError(
                "You have already evaluated this item.", code="EVALUATION_ALREADY_EXISTS", detail=exc.detail
            ) from exc
        logger.info(
            "evaluation_created table=%s id=%s target=%s by=%s",
            kind.table,
            evaluation_id,
            target_id,
            identity.profile_id,
        )
        return {"message": "Evaluation created.", "evaluation_id": evaluation_id}

    @router.get("", summary="List evaluations")
    def list_all(db: Database = Depends(get_database)):
        return _listing(db)

    @router.get("/target/{target_id}", summary="Evaluations of one target")
    def by_target(target_id: int, db: Database = Depends(get_database)):
        return _listing(db, target_id=target_id)

    @router.get("/target/{target_id}/likes", summary="Likes of one target")
    def likes_by_target(target_id: int, db: Database = Depends(get_database)):
        return _listing(db, target_id=target_id, polarity="likes")

    @router.get("/target/{target_id}/dislikes", summary="Dislikes of one target")
    def dislikes_by_target(target_id: int, db: Database = Depends(get_database)):
        return _listing(db, target_id=target_id, polarity="dislikes")

    @router.get("/profile/{profile_id}", summary="Evaluations cast by one profile")
    def by_profile(profile_id: int, db: Database = Depends(get_database)):
        return _listing(db, profile_id=profile_id)

    @router.get("/profile/{profile_id}/likes", summary="Likes cast by one profile")
    def likes_by_profile(profile_id: int, db: Database = Depends(get_database)):
        return _listing(db, profile_id=profile_id, polarity="likes")

    @router.get("/profile/{profile_id}/dislikes", summary="Dislikes cast by one profile")
    def dislikes_by_profile(profile_id: int, db: Database = Depends(get_database)):
        return _listing(db, profile_id=profile_id, polarity="dislikes")

    @router.get("/{evaluation_id}", summary="Fetch one evaluation")
    def get_one(evaluation_id: int, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch evaluation."):
            row = get_evaluation(db, kind, evaluation_id)
        if row is None:
            raise NotFoundError(not_found, code="EVALUATION_NOT_FOUND")
        return row

    @router.delete("/admin/{evaluation_id}", summary="Delete any evaluation (admin)")
    def delete_as_admin(
        evaluation_id: int,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete evaluation."):
            affected = delete_evaluation(db, kind, evaluation_id)
        if affected == 0:
            raise NotFoundError(not_found, code="EVALUATION_NOT_FOUND")
        logger.info("evaluation_deleted table=%s id=%s admin=%s", kind.table, evaluation_id, identity.profile_id)
        return {"message": "Evaluation deleted."}

    @router.patch("/{evaluation_id}", summary="Change one of your evaluations")
    def patch_own(
        evaluation_id: int,
        payload: dict,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        positive, negative = evaluation_flags(payload, required=True)
        with storage_errors(f"UPDATE_{op}_ERROR", "Failed to update evaluation."):
            affected = update_evaluation(
                db, kind, evaluation_id, positive, negative, owner_id=owner_scope(identity)
            )
        if affected == 0:
            raise NotFoundError(not_found, code="EVALUATION_NOT_FOUND")
        return {"message": "Evaluation updated."}

    @router.delete("/{evaluation_id}", summary="Delete one of your evaluations")
    def delete_own(
        evaluation_id: int,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete evaluation."):
            affected = delete_evaluation(db, kind, evaluation_id, owner_id=owner_scope(identity))
        if affected == 0:
            raise NotFoundError(not_found, code="EVALUATION_NOT_FOUND")
        return {"message": "Evaluation deleted."}

    return router


evaluation_routers = [build_evaluation_router(kind) for kind in EVALUATION_KINDS]

__all__ = ["build_evaluation_router", "evaluation_routers"]
