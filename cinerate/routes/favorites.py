"""Favorite films and favorite actors.

One router factory serves both lists; `target` is the film or the actor.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity, current_identity
from cinerate.logic.errors import ConflictError, NotFoundError, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.ownership import owner_scope, require_owner_or_admin
from cinerate.logic.repository_catalog import exists
from cinerate.logic.repository_favorites import (
    FAVORITE_ACTOR,
    FAVORITE_FILM,
    FavoriteKind,
    add_favorite,
    favorite_exists,
    list_favorites,
    remove_favorite,
    remove_profile_favorites,
    remove_target_favorites,
)
from cinerate.logic.repository_profiles import profile_exists
from cinerate.logic.validation import require_int

logger = logging.getLogger(__name__)


def build_favorite_router(kind: FavoriteKind, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix)
    catalog = kind.catalog
    target_missing = f"{catalog.table.capitalize()} not found."
    op = f"FAVORITE_{catalog.label}"

    def _add(db: Database, profile_id: int, target_id: int) -> dict:
        if not exists(db, catalog, target_id):
            raise NotFoundError(target_missing, code=catalog.not_found_code)
        if not profile_exists(db, profile_id):
            raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
        if favorite_exists(db, kind, profile_id, target_id):
            raise ConflictError("This favorite already exists.", code="RELATION_ALREADY_EXISTS")
        try:
            with storage_errors(f"ADD_{op}_ERROR", "Failed to add favorite."):
                add_favorite(db, kind, profile_id, target_id)
        except ConflictError as exc:
            raise ConflictError(
                "This favorite already exists.", code="RELATION_ALREADY_EXISTS", detail=exc.detail
            ) from exc
        logger.info("favorite_added table=%s profile=%s target=%s", kind.table, profile_id, target_id)
        return {"message": "Favorite added.", "profile_id": profile_id, "target_id": target_id}

    @router.post("", status_code=201, summary="Add a favorite")
    def create(payload: dict, identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
        target_id = require_int(payload.get("target_id"), "target_id")
        return _add(db, identity.profile_id, target_id)

    @router.post("/admin", status_code=201, summary="Add a favorite for any profile (admin)")
    def create_as_admin(
        payload: dict,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        target_id = require_int(payload.get("target_id"), "target_id")
        profile_id = require_int(payload.get("profile_id"), "profile_id")
        return _add(db, profile_id, target_id)

    @router.get("", summary="List all favorites")
    def list_all(db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch favorites."):
            return list_favorites(db, kind)

    @router.get("/profile/me", summary="Favorites of the authenticated profile")
    def list_own(identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch favorites."):
            return list_favorites(db, kind, profile_id=identity.profile_id)

    @router.get("/profile/{profile_id}/target/{target_id}", summary="One favorite of one profile")
    def get_pair(profile_id: int, target_id: int, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch favorite."):
            rows = list_favorites(db, kind, profile_id=profile_id, target_id=target_id)
        if not rows:
            raise NotFoundError("Favorite not found.", code="FAVORITE_NOT_FOUND")
        return rows[0]

    @router.get("/profile/{profile_id}", summary="Favorites of one profile")
    def list_by_profile(profile_id: int, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch favorites."):
            return list_favorites(db, kind, profile_id=profile_id)

    @router.get("/target/{target_id}", summary="Profiles that favorited one target")
    def list_by_target(target_id: int, db: Database = Depends(get_database)):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch favorites."):
            return list_favorites(db, kind, target_id=target_id)

    @router.delete("/profile/me", summary="Clear the authenticated profile's favorites")
    def clear_own(identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete favorites."):
            affected = remove_profile_favorites(db, kind, identity.profile_id)
        if affected == 0:
            raise NotFoundError("No favorites found.", code="FAVORITES_NOT_FOUND")
        return {"message": "Favorites deleted.", "deleted": affected}

    @router.delete("/profile/{profile_id}/target/{target_id}", summary="Remove a favorite (owner or admin)")
    def remove_pair(
        profile_id: int,
        target_id: int,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        if not favorite_exists(db, kind, profile_id, target_id):
            raise NotFoundError("Favorite not found.", code="FAVORITE_NOT_FOUND")
        require_owner_or_admin(identity, profile_id)
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete favorite."):
            remove_favorite(db, kind, profile_id, target_id)
        return {"message": "Favorite deleted."}

    @router.delete("/target/{target_id}", summary="Remove a target from every list (admin)")
    def clear_target(
        target_id: int,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete favorites."):
            affected = remove_target_favorites(db, kind, target_id)
        if affected == 0:
            raise NotFoundError("No favorites found.", code="FAVORITES_NOT_FOUND")
        logger.info("favorites_cleared table=%s target=%s admin=%s", kind.table, target_id, identity.profile_id)
        return {"message": "Favorites deleted.", "deleted": affected}

    @router.delete("/{target_id}", summary="Remove one of your favorites")
    def remove_own(
        target_id: int,
        identity: Identity = Depends(current_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete favorite."):
            affected = remove_favorite(db, kind, owner_scope(identity), target_id)
        if affected == 0:
            raise NotFoundError("Favorite not found.", code="FAVORITE_NOT_FOUND")
        return {"message": "Favorite deleted."}

    return router


favorite_films_router = build_favorite_router(FAVORITE_FILM, "/favorite-films")
favorite_actors_router = build_favorite_router(FAVORITE_ACTOR, "/favorite-actors")

__all__ = ["build_favorite_router", "favorite_films_router", "favorite_actors_router"]
