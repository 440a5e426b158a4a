"""Login and logout.

A successful login returns the signed token in the body and also sets it as
an HTTP-only cookie; protected routes accept either form.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from werkzeug.security import check_password_hash

from cinerate.db.base import Database, get_database
from cinerate.logic.errors import AuthenticationError, storage_errors
from cinerate.logic.identity import issue_token
from cinerate.logic.repository_profiles import get_credentials
from cinerate.logic.validation import is_blank, raise_if_errors

router = APIRouter(prefix="/auth")
logger = logging.getLogger(__name__)


@router.post("/login", summary="Log in with email and password")
def login(payload: dict, request: Request, db: Database = Depends(get_database)):
    errors = []
    if is_blank(payload.get("email")):
        errors.append("email is required")
    if is_blank(payload.get("password")):
        errors.append("password is required")
    raise_if_errors(errors)

    email = payload["email"].strip()
    with storage_errors("LOGIN_ERROR", "Failed to log in."):
        creds = get_credentials(db, email)
    if creds is None or not check_password_hash(creds["password_hash"], payload["password"]):
        logger.info("login_failed email=%s", email)
        raise AuthenticationError("Wrong email or password.", code="INVALID_CREDENTIALS")

    auth = request.app.state.config.auth
    token = issue_token(auth, creds)
    logger.info("login_succeeded profile_id=%s", creds["profile_id"])
    resp = JSONResponse(
        {"message": "Logged in.", "token": token, "profile_id": creds["profile_id"]},
        status_code=200,
    )
    resp.set_cookie(
        auth.cookie_name,
        token,
        max_age=auth.token_ttl_seconds,
        httponly=True,
        secure=auth.cookie_secure,
        samesite="lax",
    )
    return resp


@router.post("/logout", summary="Clear the session cookie")
def logout(request: Request):
    auth = request.app.state.config.auth
    resp = JSONResponse({"message": "Logged out."}, status_code=200)
    resp.delete_cookie(auth.cookie_name)
    return resp


__all__ = ["router", "login", "logout"]
