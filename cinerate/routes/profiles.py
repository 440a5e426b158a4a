"""Profile routes: registration, lookup, updates, promotion and deletion.

Registration and updates take multipart forms so a profile photo can travel
with the text fields. Deletion runs the cascade in
`cinerate.logic.account_deletion`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import Response
from werkzeug.security import generate_password_hash

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity, current_identity
from cinerate.logic.account_deletion import delete_profile_cascade
from cinerate.logic.errors import ConflictError, NotFoundError, StorageError, ValidationFailed, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.ownership import require_owner_or_admin
from cinerate.logic.repository_profiles import (
    create_profile,
    email_in_use,
    get_photo,
    get_profile,
    list_profiles,
    promote_profile,
    search_profiles_by_email,
    update_profile,
)
from cinerate.logic.validation import profile_errors, raise_if_errors, require_int

router = APIRouter(prefix="/profiles")
logger = logging.getLogger(__name__)


def _read_upload(photo: Optional[UploadFile]) -> Optional[bytes]:
    if photo is None:
        return None
    data = photo.file.read()
    return data or None


def _profile_or_404(db: Database, profile_id: int) -> Dict[str, Any]:
    with storage_errors("GET_PROFILE_ERROR", "Failed to fetch profile."):
        profile = get_profile(db, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
    return profile


async def submitted_fields(request: Request) -> FrozenSet[str]:
    """Names of the form fields present in the request, including empty ones."""
    form = await request.form()
    return frozenset(form.keys())


def _partial_changes(
    submitted: FrozenSet[str],
    name: Optional[str],
    email: Optional[str],
    biography: Optional[str],
    password: Optional[str],
    photo: Optional[bytes],
) -> Dict[str, Any]:
    """Collect the fields a partial update sets.

    Empty name, email or password values are ignored; an empty biography
    clears it.
    """
    changes: Dict[str, Any] = {
        k: v for k, v in (("name", name), ("email", email), ("password", password)) if v
    }
    if biography is not None or "biography" in submitted:
        changes["biography"] = biography or None
    if photo:
        changes["photo"] = photo
    return changes


def _store_changes(db: Database, profile_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and persist a partial update for `profile_id`."""
    if not changes:
        raise ValidationFailed("No data sent for update.", code="NO_UPDATE_DATA")
    raise_if_errors(profile_errors(changes, partial=True))
    if "email" in changes:
        changes["email"] = changes["email"].strip()
        if email_in_use(db, changes["email"], exclude_profile_id=profile_id):
            raise ValidationFailed("Invalid request data.", errors=["email is already registered"])
    if "password" in changes:
        changes["password_hash"] = generate_password_hash(changes.pop("password"))
    with storage_errors("UPDATE_PROFILE_ERROR", "Failed to update profile."):
        updated = update_profile(db, profile_id, changes)
    if updated == 0:
        raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
    logger.info("profile_updated profile_id=%s fields=%s", profile_id, sorted(changes))
    return {"message": "Profile updated."}


def _cascade_delete(db: Database, profile_id: int) -> Dict[str, Any]:
    try:
        with storage_errors("DELETE_PROFILE_ERROR", "Failed to delete profile."):
            result = delete_profile_cascade(db, profile_id)
    except ConflictError as exc:
        # A dependent row the cascade does not know about blocked the delete.
        raise StorageError("Failed to delete profile.", code="DELETE_PROFILE_ERROR", detail=exc.detail) from exc
    if not result.deleted:
        raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
    return {"message": "Profile deleted.", "rows_deleted": result.rows_deleted}


@router.post("", status_code=201, summary="Register a profile")
def register_profile(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    biography: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    db: Database = Depends(get_database),
):
    payload = {"name": name, "email": email, "biography": biography, "password": password}
    errors = profile_errors(payload)
    if not errors and email_in_use(db, email.strip()):
        errors.append("email is already registered")
    raise_if_errors(errors)

    with storage_errors("ADD_PROFILE_ERROR", "Failed to create profile."):
        profile_id = create_profile(
            db,
            name=name.strip(),
            email=email.strip(),
            biography=biography,
            password_hash=generate_password_hash(password),
            photo=_read_upload(photo),
        )
    logger.info("profile_created profile_id=%s", profile_id)
    return {"message": "Profile created.", "profile_id": profile_id}


@router.get("", summary="List profiles, optionally filtered by name")
def get_profiles(name: Optional[str] = None, db: Database = Depends(get_database)):
    with storage_errors("GET_PROFILE_ERROR", "Failed to fetch profiles."):
        return list_profiles(db, name=name)


@router.get("/search-email", summary="Search profiles by email")
def get_profiles_by_email(email: Optional[str] = None, db: Database = Depends(get_database)):
    with storage_errors("GET_PROFILE_ERROR", "Failed to fetch profiles."):
        if not email:
            return list_profiles(db)
        return search_profiles_by_email(db, email)


@router.patch("/me", summary="Partially update the authenticated profile")
def patch_own_profile(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    biography: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    submitted: FrozenSet[str] = Depends(submitted_fields),
    identity: Identity = Depends(current_identity),
    db: Database = Depends(get_database),
):
    changes = _partial_changes(submitted, name, email, biography, password, _read_upload(photo))
    return _store_changes(db, identity.profile_id, changes)


@router.patch("/admin", summary="Promote a profile to administrator")
def promote(payload: dict, identity: Identity = Depends(admin_identity), db: Database = Depends(get_database)):
    profile_id = require_int(payload.get("profile_id"), "profile_id")
    with storage_errors("UPDATE_PROFILE_ERROR", "Failed to update profile."):
        updated = promote_profile(db, profile_id)
    if updated == 0:
        raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
    logger.info("profile_promoted profile_id=%s by=%s", profile_id, identity.profile_id)
    return {"message": "Profile promoted to administrator."}


@router.delete("/me", summary="Delete the authenticated profile and all of its data")
def delete_own_profile(identity: Identity = Depends(current_identity), db: Database = Depends(get_database)):
    return _cascade_delete(db, identity.profile_id)


@router.delete("/admin/{profile_id}", summary="Delete any profile and all of its data (admin)")
def delete_profile_as_admin(
    profile_id: int,
    identity: Identity = Depends(admin_identity),
    db: Database = Depends(get_database),
):
    logger.info("admin_profile_delete target=%s by=%s", profile_id, identity.profile_id)
    return _cascade_delete(db, profile_id)


@router.get("/{profile_id}", summary="Fetch one profile")
def get_one_profile(profile_id: int, db: Database = Depends(get_database)):
    return _profile_or_404(db, profile_id)


@router.get("/{profile_id}/photo", summary="Fetch a profile photo")
def get_profile_photo(profile_id: int, db: Database = Depends(get_database)):
    with storage_errors("GET_IMAGE_ERROR", "Failed to fetch profile photo."):
        data = get_photo(db, profile_id)
    if not data:
        raise NotFoundError("Image not found.", code="IMAGE_NOT_FOUND")
    return Response(content=data, media_type="image/jpeg")


@router.put("/{profile_id}", summary="Replace a profile (owner or admin)")
def put_profile(
    profile_id: int,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    biography: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    identity: Identity = Depends(current_identity),
    db: Database = Depends(get_database),
):
    target = _profile_or_404(db, profile_id)
    require_owner_or_admin(identity, target["profile_id"])

    payload = {"name": name, "email": email, "biography": biography, "password": password}
    errors = profile_errors(payload)
    if not errors and email_in_use(db, email.strip(), exclude_profile_id=profile_id):
        errors.append("email is already registered")
    raise_if_errors(errors)

    changes = {
        "name": name.strip(),
        "email": email.strip(),
        "biography": biography,
        "password_hash": generate_password_hash(password),
        "photo": _read_upload(photo),
    }
    with storage_errors("UPDATE_PROFILE_ERROR", "Failed to update profile."):
        updated = update_profile(db, profile_id, changes)
    if updated == 0:
        raise NotFoundError("Profile not found.", code="PROFILE_NOT_FOUND")
    logger.info("profile_replaced profile_id=%s by=%s", profile_id, identity.profile_id)
    return {"message": "Profile updated."}


@router.patch("/{profile_id}", summary="Partially update a profile (owner or admin)")
def patch_profile(
    profile_id: int,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    biography: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    submitted: FrozenSet[str] = Depends(submitted_fields),
    identity: Identity = Depends(current_identity),
    db: Database = Depends(get_database),
):
    target = _profile_or_404(db, profile_id)
    require_owner_or_admin(identity, target["profile_id"])
    changes = _partial_changes(submitted, name, email, biography, password, _read_upload(photo))
    return _store_changes(db, profile_id, changes)


__all__ = ["router"]
