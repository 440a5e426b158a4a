"""Catalog routes for films, actors, directors, producers and genres.

Reads are public; creating, updating and deleting entries is admin-only. A
catalog row that is still referenced (comments, evaluations, favorites,
film credits) cannot be deleted. Directors, producers and genres carry
unique names.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity
from cinerate.logic.errors import ConflictError, NotFoundError, ValidationFailed, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.repository_catalog import (
    ACTOR,
    DIRECTOR,
    FILM,
    GENRE,
    PRODUCER,
    CatalogResource,
    create_row,
    delete_row,
    get_row,
    list_rows,
    name_exists,
    update_row,
)
from cinerate.logic.validation import is_blank, raise_if_errors

logger = logging.getLogger(__name__)


def _clean(
    db: Database,
    resource: CatalogResource,
    payload: dict,
    partial: bool = False,
    row_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Validate a catalog body; a full body resets every optional column it omits."""
    values: Dict[str, Any] = {}
    errors = []
    if not partial or "name" in payload:
        name = payload.get("name")
        if is_blank(name):
            errors.append("name is required and must be a non-empty string")
        elif resource.unique_name and name_exists(db, resource, name.strip(), exclude_id=row_id):
            errors.append(f"a {resource.table} named '{name.strip()}' already exists")
        else:
            values["name"] = name.strip()
    for col in resource.columns:
        if col == "name" or (partial and col not in payload):
            continue
        value = payload.get(col)
        if value is not None:
            if col in resource.bool_columns:
                if not isinstance(value, bool):
                    errors.append(f"{col} must be a boolean")
            elif not isinstance(value, str):
                errors.append(f"{col} must be a string")
        values[col] = value
    raise_if_errors(errors)
    return values


def build_catalog_router(resource: CatalogResource, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix)
    not_found = f"{resource.table.capitalize()} not found."
    op = resource.label

    def _store(db: Database, row_id: int, values: Dict[str, Any], identity: Identity) -> Dict[str, Any]:
        with storage_errors(f"UPDATE_{op}_ERROR", "Failed to update catalog entry."):
            affected = update_row(db, resource, row_id, values)
        if affected == 0:
            raise NotFoundError(not_found, code=resource.not_found_code)
        logger.info(
            "catalog_updated table=%s id=%s fields=%s admin=%s",
            resource.table,
            row_id,
            sorted(values),
            identity.profile_id,
        )
        return {"message": "Updated."}

    @router.get("", summary="List entries, optionally filtered by name")
    def list_all(name: Optional[str] = None, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch catalog."):
            return list_rows(db, resource, name=name)

    @router.get("/{row_id}", summary="Fetch one entry")
    def get_one(row_id: int, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch catalog entry."):
            row = get_row(db, resource, row_id)
        if row is None:
            raise NotFoundError(not_found, code=resource.not_found_code)
        return row

    @router.post("", status_code=201, summary="Add an entry (admin)")
    def create(payload: dict, identity: Identity = Depends(admin_identity), db: Database = Depends(get_database)):
        values = {k: v for k, v in _clean(db, resource, payload).items() if v is not None}
        with storage_errors(f"ADD_{op}_ERROR", "Failed to create catalog entry."):
            row_id = create_row(db, resource, values)
        logger.info("catalog_created table=%s id=%s admin=%s", resource.table, row_id, identity.profile_id)
        return {"message": "Created.", resource.pk: row_id}

    @router.put("/{row_id}", summary="Replace an entry (admin)")
    def replace(
        row_id: int,
        payload: dict,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        return _store(db, row_id, _clean(db, resource, payload, row_id=row_id), identity)

    @router.patch("/{row_id}", summary="Partially update an entry (admin)")
    def patch(
        row_id: int,
        payload: dict,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        values = _clean(db, resource, payload, partial=True, row_id=row_id)
        if not values:
            raise ValidationFailed("No data sent for update.", code="NO_UPDATE_DATA")
        return _store(db, row_id, values, identity)

    @router.delete("/{row_id}", summary="Delete an entry (admin)")
    def delete(row_id: int, identity: Identity = Depends(admin_identity), db: Database = Depends(get_database)):
        try:
            with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete catalog entry."):
                affected = delete_row(db, resource, row_id)
        except ConflictError as exc:
            raise ConflictError(
                f"{resource.table.capitalize()} is still referenced and cannot be deleted.",
                code=resource.in_use_code,
                detail=exc.detail,
            ) from exc
        if affected == 0:
            raise NotFoundError(not_found, code=resource.not_found_code)
        logger.info("catalog_deleted table=%s id=%s admin=%s", resource.table, row_id, identity.profile_id)
        return {"message": "Deleted."}

    return router


films_router = build_catalog_router(FILM, "/films")
actors_router = build_catalog_router(ACTOR, "/actors")
directors_router = build_catalog_router(DIRECTOR, "/directors")
producers_router = build_catalog_router(PRODUCER, "/producers")
genres_router = build_catalog_router(GENRE, "/genres")

__all__ = [
    "build_catalog_router",
    "films_router",
    "actors_router",
    "directors_router",
    "producers_router",
    "genres_router",
]
