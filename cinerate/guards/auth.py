"""Authentication guards used as FastAPI dependencies.

`current_identity` rejects the request with 401 before the handler runs when
no valid token is presented (cookie or `Authorization: Bearer`).
`admin_identity` additionally requires the admin flag (403).
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from cinerate.logic.errors import AuthenticationError
from cinerate.logic.identity import Identity, decode_token
from cinerate.logic.ownership import require_admin


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization") or ""
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def current_identity(request: Request) -> Identity:
    auth = request.app.state.config.auth
    token = _bearer_token(request) or request.cookies.get(auth.cookie_name)
    if not token:
        raise AuthenticationError("Authentication required.", code="TOKEN_MISSING")
    return decode_token(auth, token)


def admin_identity(identity: Identity = Depends(current_identity)) -> Identity:
    require_admin(identity)
    return identity


__all__ = ["current_identity", "admin_identity"]
