"""Ownership-aware authorization policy.

Mutations on user-generated content (suggestions, comments, favorites,
evaluations, profiles) are allowed for the row's owner or for an admin.
The policy is enforced in one of three ways, chosen per endpoint:

- admin-only endpoints call `require_admin` and have no ownership fallback;
- row-scoped endpoints bind `owner_scope(identity)` into
  `WHERE <pk> = :id AND profile_id = :owner_id`, so a non-owner simply
  matches nothing and gets a not-found answer;
- pre-checked endpoints fetch the owner id from storage and call
  `require_owner_or_admin` before writing.
"""

from __future__ import annotations

import logging

from cinerate.logic.errors import ForbiddenError
from cinerate.logic.identity import Identity

logger = logging.getLogger(__name__)


def can_modify(identity: Identity, owner_id: int) -> bool:
    return identity.profile_id == int(owner_id) or identity.is_admin


def require_owner_or_admin(identity: Identity, owner_id: int) -> None:
    if not can_modify(identity, owner_id):
        logger.info(
            "ownership_denied actor=%s owner=%s", identity.profile_id, owner_id
        )
        raise ForbiddenError("You may only modify your own data.", code="FORBIDDEN")


def require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        logger.info("admin_required_denied actor=%s", identity.profile_id)
        raise ForbiddenError("Administrator access required.", code="ADMIN_REQUIRED")


def owner_scope(identity: Identity) -> int:
    """Owner id to bind into a row-scoped statement.

    The admin flag is not consulted here; admins go through the unscoped
    `/admin/...` endpoints.
    """
    return identity.profile_id


__all__ = ["can_modify", "require_owner_or_admin", "require_admin", "owner_scope"]
