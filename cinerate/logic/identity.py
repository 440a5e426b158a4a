"""Signed identity tokens.

A token carries the subject profile id, its email and the admin flag. It is
issued at login and verified on every protected request; the decoded
`Identity` is what the ownership policy reasons about.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import jwt

from cinerate.config import AuthConfig
from cinerate.logic.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    profile_id: int
    is_admin: bool = False
    email: Optional[str] = None


def issue_token(auth: AuthConfig, profile: Mapping[str, Any], now: Optional[datetime] = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(profile["profile_id"]),
        "email": profile.get("email"),
        "adm": bool(profile.get("is_admin")),
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=auth.token_ttl_seconds),
    }
    return jwt.encode(payload, auth.jwt_secret, algorithm=auth.algorithm)


def decode_token(auth: AuthConfig, token: str) -> Identity:
    """Verify `token` and return the identity it carries.

    Raises AuthenticationError for a bad signature, an expired token or a
    subject that is not a profile id.
    """
    try:
        claims = jwt.decode(
            token,
            auth.jwt_secret,
            algorithms=[auth.algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Session expired, please log in again.", code="TOKEN_EXPIRED") from exc
    except jwt.InvalidTokenError as exc:
        logger.info("token_rejected reason=%s", type(exc).__name__)
        raise AuthenticationError("Invalid authentication token.", code="INVALID_TOKEN") from exc

    try:
        profile_id = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid authentication token.", code="INVALID_TOKEN") from exc
    return Identity(profile_id=profile_id, is_admin=bool(claims.get("adm")), email=claims.get("email"))


__all__ = ["Identity", "issue_token", "decode_token"]
