"""Payload validation shared by the route handlers.

Checks collect human-readable messages instead of stopping at the first
problem; `raise_if_errors` turns a non-empty list into a 400 response.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Tuple

from cinerate.logic.errors import ValidationFailed

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def raise_if_errors(errors: List[str], message: str = "Invalid request data.") -> None:
    if errors:
        raise ValidationFailed(message, errors=errors)


def profile_errors(payload: Mapping[str, Any], partial: bool = False) -> List[str]:
    """Validate profile fields.

    With `partial` only the keys present are checked; otherwise name, email
    and password are required.
    """
    errors: List[str] = []
    if not partial or "name" in payload:
        if is_blank(payload.get("name")):
            errors.append("name is required and must be a string")
    if not partial or "email" in payload:
        email = payload.get("email")
        if is_blank(email):
            errors.append("email is required and must be a string")
        elif not _EMAIL_RE.match(email.strip()):
            errors.append("email must be a valid address")
    if not partial or "password" in payload:
        if is_blank(payload.get("password")):
            errors.append("password is required")
    biography = payload.get("biography")
    if biography is not None and not isinstance(biography, str):
        errors.append("biography must be a string")
    return errors


def require_int(value: Any, field: str) -> int:
    """Coerce an id-like value; booleans and fractional numbers are rejected."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationFailed("Invalid request data.", errors=[f"{field} must be an integer"])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationFailed("Invalid request data.", errors=[f"{field} must be an integer"]) from None


def require_text(value: Any, field: str) -> str:
    if is_blank(value):
        raise ValidationFailed("Invalid request data.", errors=[f"{field} is required and must be a non-empty string"])
    return value.strip()


def optional_text(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailed("Invalid request data.", errors=[f"{field} must be a string"])
    return value


def _flag(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    return None


def evaluation_flags(payload: Mapping[str, Any], required: bool = False) -> Tuple[bool, bool]:
    """Read `positive`/`negative` from a body and return them as booleans.

    Flags may be JSON booleans or the integers 0/1. Without `required` an
    absent flag counts as false. An evaluation is a like, a dislike or
    neither, never both.
    """
    errors: List[str] = []
    flags: List[bool] = []
    for field in ("positive", "negative"):
        if field not in payload:
            if required:
                errors.append(f"{field} is required")
            flags.append(False)
            continue
        value = _flag(payload[field])
        if value is None:
            errors.append(f"{field} must be a boolean")
            value = False
        flags.append(value)
    raise_if_errors(errors)
    positive, negative = flags
    if positive and negative:
        raise ValidationFailed(
            "An evaluation cannot be positive and negative at the same time.",
            errors=["positive and negative cannot both be true"],
        )
    return positive, negative


__all__ = [
    "is_blank",
    "raise_if_errors",
    "profile_errors",
    "require_int",
    "require_text",
    "optional_text",
    "evaluation_flags",
]
