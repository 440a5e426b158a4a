"""Comment routes.

Listings include `total_likes` and `total_dislikes`. Authors edit and
delete their own comments through `/{id}`; admins post on behalf of a
profile and delete any comment, or every comment of a film.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity, current_identity
from cinerate.logic.errors import NotFoundError, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.ownership import owner_scope
from cinerate.logic.repository_catalog import FILM, exists
from cinerate.logic.repository_comments import (
    create_comment,
    delete_comment,
    delete_film_comments,
    get_comment,
    list_comments,
    update_comment,
)
from cinerate.logic.repository_profiles import profile_exists
from cinerate.logic.validation import require_int, require_text

router = APIRouter(prefix="/comments")
logger = logging.getLogger(__name__)


def _post(db: Database, profile_id: int, film_id: int, body: str) -> dict:
    if not profile_exists(db, profile_id):
        raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
    if not exists(db, FILM, film_id):
        raise NotFoundError("Film not found.", code="FILM_NOT_FOUND")
    with storage_errors("ADD_COMMENT_ERROR", "Failed to create comment."):
        comment_id = create_comment(db, profile_id, film_id, body)
    logger.info("comment_created id=%s film=%s profile=%s", comment_id, film_id, profile_id)
    return {"message": "Comment created.", "comment_id": comment_id}


@router.get("", summary="List comments with like/dislike totals")
def get_comments(db: Database = Depends(get_database)):
    with storage_errors("GET_COMMENT_ERROR", "Failed to fetch comments."):
        return list_comments(db)


@router.get("/profile/me", summary="Comments written by the authenticated profile")
def get_own_comments(identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
    with storage_errors("GET_COMMENT_ERROR", "Failed to fetch comments."):
        return list_comments(db, profile_id=identity.profile_id)


@router.get("/profile/{profile_id}/film/{film_id}", summary="Comments of one profile on one film")
def get_profile_film_comments(profile_id: int, film_id: int, db: Database = Depends(get_database)):
    with storage_errors("GET_COMMENT_ERROR", "Failed to fetch comments."):
        return list_comments(db, profile_id=profile_id, film_id=film_id)


@router.get("/profile/{profile_id}", summary="Comments written by one profile")
def get_profile_comments(profile_id: int, db: Database = Depends(get_database)):
    with storage_errors("GET_COMMENT_ERROR", "Failed to fetch comments."):
        return list_comments(db, profile_id=profile_id)


@router.get("/film/{film_id}", summary="Comments on one film")
def get_film_comments(film_id: int, db: Database = Depends(get_database)):
    with storage_errors("GET_COMMENT_ERROR", "Failed to fetch comments."):
        return list_comments(db, film_id=film_id)


@router.get("/{comment_id}", summary="Fetch one comment")
def get_one_comment(comment_id: int, db: Database = Depends(get_database)):
    with storage_errors("GET_COMMENT_ERROR", "Failed to fetch comment."):
        row = get_comment(db, comment_id)
    if row is None:
        raise NotFoundError("Comment not found.", code="COMMENT_NOT_FOUND")
    return row


@router.post("", status_code=201, summary="Comment on a film")
def post_comment(payload: dict, identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
    film_id = require_int(payload.get("film_id"), "film_id")
    body = require_text(payload.get("body"), "body")
    return _post(db, identity.profile_id, film_id, body)


@router.post("/admin", status_code=201, summary="Comment on a film on behalf of a profile (admin)")
def post_comment_as_admin(
    payload: dict,
    identity: Identity = Depends(admin_identity),
    db: Database = Depends(get_database),
):
    film_id = require_int(payload.get("film_id"), "film_id")
    profile_id = require_int(payload.get("profile_id"), "profile_id")
    body = require_text(payload.get("body"), "body")
    return _post(db, profile_id, film_id, body)


@router.patch("/{comment_id}", summary="Edit one of your comments")
def patch_comment(
    comment_id: int,
    payload: dict,
    identity: Identity = Depends(current_identity),
    db: Database = Depends(get_database),
):
    body = require_text(payload.get("body"), "body")
    with storage_errors("UPDATE_COMMENT_ERROR", "Failed to update comment."):
        affected = update_comment(db, comment_id, body, owner_id=owner_scope(identity))
    if affected == 0:
        raise NotFoundError("Comment not found.", code="COMMENT_NOT_FOUND")
    return {"message": "Comment updated."}


@router.delete("/admin/{comment_id}", summary="Delete any comment (admin)")
def delete_comment_as_admin(
    comment_id: int,
    identity: Identity = Depends(admin_identity),
    db: Database = Depends(get_database),
):
    with storage_errors("DELETE_COMMENT_ERROR", "Failed to delete comment."):
        affected = delete_comment(db, comment_id)
    if affected == 0:
        raise NotFoundError("Comment not found.", code="COMMENT_NOT_FOUND")
    logger.info("comment_deleted id=%s admin=%s", comment_id, identity.profile_id)
    return {"message": "Comment deleted."}


@router.delete("/film/{film_id}", summary="Delete every comment on a film (admin)")
def delete_comments_of_film(
    film_id: int,
    identity: Identity = Depends(admin_identity),
    db: Database = Depends(get_database),
):
    with storage_errors("DELETE_COMMENT_ERROR", "Failed to delete comments."):
        affected = delete_film_comments(db, film_id)
    if affected == 0:
        raise NotFoundError("No comments found for this film.", code="COMMENT_NOT_FOUND")
    logger.info("film_comments_deleted film=%s count=%s admin=%s", film_id, affected, identity.profile_id)
    return {"message": "Comments deleted.", "deleted": affected}


@router.delete("/{comment_id}", summary="Delete one of your comments")
def delete_own_comment(
    comment_id: int,
    identity: Identity = Depends(current_identity),
    db: Database = Depends(get_database),
):
    with storage_errors("DELETE_COMMENT_ERROR", "Failed to delete comment."):
        affected = delete_comment(db, comment_id, owner_id=owner_scope(identity))
    if affected == 0:
        raise NotFoundError("Comment not found.", code="COMMENT_NOT_FOUND")
    return {"message": "Comment deleted."}


__all__ = ["router"]
