"""Film and actor suggestion routes.

Both resources share one router factory. Owners edit and delete through
`/{id}` (row-scoped: someone else's suggestion answers 404); admins use the
unscoped `/admin/{id}` variants.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity, current_identity
from cinerate.logic.errors import NotFoundError, ValidationFailed, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.ownership import owner_scope
from cinerate.logic.repository_catalog import name_exists
from cinerate.logic.repository_suggestions import (
    ACTOR_SUGGESTION,
    FILM_SUGGESTION,
    SuggestionKind,
    create_suggestion,
    delete_suggestion,
    get_suggestion,
    list_suggestions,
    update_suggestion,
)
from cinerate.logic.validation import is_blank, optional_text, raise_if_errors

logger = logging.getLogger(__name__)


def _clean(kind: SuggestionKind, db: Database, payload: dict, partial: bool) -> Dict[str, Any]:
    """Validate a suggestion body and return the column values to write."""
    values: Dict[str, Any] = {}
    errors = []
    if not partial or "name" in payload:
        name = payload.get("name")
        if is_blank(name):
            errors.append("name is required and must be a non-empty string")
        elif name_exists(db, kind.catalog, name.strip()):
            errors.append(f"a {kind.catalog.table} named '{name.strip()}' is already in the catalog")
        else:
            values["name"] = name.strip()
    if "synopsis" in kind.columns and (not partial or "synopsis" in payload):
        try:
            values["synopsis"] = optional_text(payload.get("synopsis"), "synopsis")
        except ValidationFailed as exc:
            errors.extend(exc.errors)
    raise_if_errors(errors)
    return values


def build_suggestion_router(kind: SuggestionKind, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix)
    not_found = f"{kind.label.replace('_', ' ').capitalize()} not found."
    op = kind.label

    def _write_result(affected: int, message: str) -> Dict[str, Any]:
        if affected == 0:
            raise NotFoundError(not_found, code=kind.not_found_code)
        return {"message": message}

    @router.post("", status_code=201, summary="Submit a suggestion")
    def create(payload: dict, identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
        values = _clean(kind, db, payload, partial=False)
        with storage_errors(f"ADD_{op}_ERROR", "Failed to create suggestion."):
            suggestion_id = create_suggestion(db, kind, identity.profile_id, values)
        logger.info("suggestion_created table=%s id=%s by=%s", kind.table, suggestion_id, identity.profile_id)
        return {"message": "Suggestion created.", "suggestion_id": suggestion_id}

    @router.get("", summary="List suggestions, optionally filtered by name")
    def list_all(name: Optional[str] = None, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch suggestions."):
            return list_suggestions(db, kind, name=name)

    @router.get("/{suggestion_id}", summary="Fetch one suggestion")
    def get_one(suggestion_id: int, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch suggestion."):
            row = get_suggestion(db, kind, suggestion_id)
        if row is None:
            raise NotFoundError(not_found, code=kind.not_found_code)
        return row

    @router.put("/admin/{suggestion_id}", summary="Replace any suggestion (admin)")
    def put_as_admin(
        suggestion_id: int,
        payload: dict,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        values = _clean(kind, db, payload, partial=False)
        with storage_errors(f"UPDATE_{op}_ERROR", "Failed to update suggestion."):
            affected = update_suggestion(db, kind, suggestion_id, values)
        return _write_result(affected, "Suggestion updated.")

    @router.patch("/admin/{suggestion_id}", summary="Partially update any suggestion (admin)")
    def patch_as_admin(
        suggestion_id: int,
        payload: dict,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        values = _clean(kind, db, payload, partial=True)
        if not values:
            raise ValidationFailed("No data sent for update.", code="NO_UPDATE_DATA")
        with storage_errors(f"UPDATE_{op}_ERROR", "Failed to update suggestion."):
            affected = update_suggestion(db, kind, suggestion_id, values)
        return _write_result(affected, "Suggestion updated.")

    @router.delete("/admin/{suggestion_id}", summary="Delete any suggestion (admin)")
    def delete_as_admin(
        suggestion_id: int,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete suggestion."):
            affected = delete_suggestion(db, kind, suggestion_id)
        result = _write_result(affected, "Suggestion deleted.")
        logger.info("suggestion_deleted table=%s id=%s admin=%s", kind.table, suggestion_id, identity.profile_id)
        return result

    @router.put("/{suggestion_id}", summary="Replace one of your suggestions")
    def put_own(
        suggestion_id: int,
        payload: dict,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        values = _clean(kind, db, payload, partial=False)
        with storage_errors(f"UPDATE_{op}_ERROR", "Failed to update suggestion."):
            affected = update_suggestion(db, kind, suggestion_id, values, owner_id=owner_scope(identity))
        return _write_result(affected, "Suggestion updated.")

    @router.patch("/{suggestion_id}", summary="Partially update one of your suggestions")
    def patch_own(
        suggestion_id: int,
        payload: dict,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        values = _clean(kind, db, payload, partial=True)
        if not values:
            raise ValidationFailed("No data sent for update.", code="NO_UPDATE_DATA")
        with storage_errors(f"UPDATE_{op}_ERROR", "Failed to update suggestion."):
            affected = update_suggestion(db, kind, suggestion_id, values, owner_id=owner_scope(identity))
        return _write_result(affected, "Suggestion updated.")

    @router.delete("/{suggestion_id}", summary="Delete one of your suggestions")
    def delete_own(
        suggestion_id: int,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete suggestion."):
            affected = delete_suggestion(db, kind, suggestion_id, owner_id=owner_scope(identity))
        return _write_result(affected, "Suggestion deleted.")

    return router


film_suggestions_router = build_suggestion_router(FILM_SUGGESTION, "/film-suggestions")
actor_suggestions_router = build_suggestion_router(ACTOR_SUGGESTION, "/actor-suggestions")

__all__ = ["build_suggestion_router", "film_suggestions_router", "actor_suggestions_router"]
