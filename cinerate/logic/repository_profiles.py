"""Profile data access helpers.

Keeps profile SQL out of the route handlers. Password hashes and photos are
never part of the public row shape; they have dedicated accessors.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from cinerate.db.base import Database

_PUBLIC_COLUMNS = "profile_id, name, email, biography, is_admin"

# Columns a client may change; is_admin is only set through promote_profile.
UPDATABLE_COLUMNS = ("name", "email", "biography", "password_hash", "photo")


def _public(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    out = dict(row)
    out["is_admin"] = bool(out.get("is_admin"))
    return out


def create_profile(
    db: Database,
    name: str,
    email: str,
    biography: Optional[str],
    password_hash: str,
    photo: Optional[bytes] = None,
) -> Optional[int]:
    result = db.execute(
        """
        INSERT INTO profile (name, email, biography, password_hash, photo, is_admin)
        VALUES (:name, :email, :biography, :password_hash, :photo, :is_admin)
        RETURNING profile_id
        """,
        {
            "name": name,
            "email": email,
            "biography": biography,
            "password_hash": password_hash,
            "photo": photo,
            "is_admin": False,
        },
    )
    return result.inserted_id


def list_profiles(db: Database, name: Optional[str] = None) -> List[Dict[str, Any]]:
    if name:
        rows = db.fetch_all(
            f"SELECT {_PUBLIC_COLUMNS} FROM profile WHERE name LIKE :pattern ORDER BY profile_id",
            {"pattern": f"%{name}%"},
        )
    else:
        rows = db.fetch_all(f"SELECT {_PUBLIC_COLUMNS} FROM profile ORDER BY profile_id")
    return [_public(r) for r in rows]


def search_profiles_by_email(db: Database, email: str) -> List[Dict[str, Any]]:
    rows = db.fetch_all(
        f"SELECT {_PUBLIC_COLUMNS} FROM profile WHERE email LIKE :pattern ORDER BY profile_id",
        {"pattern": f"%{email}%"},
    )
    return [_public(r) for r in rows]


def get_profile(db: Database, profile_id: int) -> Optional[Dict[str, Any]]:
    row = db.fetch_one(
        f"SELECT {_PUBLIC_COLUMNS} FROM profile WHERE profile_id = :profile_id",
        {"profile_id": int(profile_id)},
    )
    return _public(row)


def profile_exists(db: Database, profile_id: int) -> bool:
    row = db.fetch_one(
        "SELECT 1 AS present FROM profile WHERE profile_id = :profile_id",
        {"profile_id": int(profile_id)},
    )
    return row is not None


def email_in_use(db: Database, email: str, exclude_profile_id: Optional[int] = None) -> bool:
    """Return True when another profile already registered `email`."""
    sql = "SELECT profile_id FROM profile WHERE email = :email"
    params: Dict[str, Any] = {"email": email}
    if exclude_profile_id is not None:
        sql += " AND profile_id <> :exclude"
        params["exclude"] = int(exclude_profile_id)
    return db.fetch_one(sql, params) is not None


def get_credentials(db: Database, email: str) -> Optional[Dict[str, Any]]:
    """Row used by login: id, email, admin flag and the stored hash."""
    row = db.fetch_one(
        "SELECT profile_id, email, is_admin, password_hash FROM profile WHERE email = :email",
        {"email": email},
    )
    if row is not None:
        row["is_admin"] = bool(row.get("is_admin"))
    return row


def get_photo(db: Database, profile_id: int) -> Optional[bytes]:
    row = db.fetch_one(
        "SELECT photo FROM profile WHERE profile_id = :profile_id",
        {"profile_id": int(profile_id)},
    )
    if row is None or row.get("photo") is None:
        return None
    return bytes(row["photo"])


def update_profile(db: Database, profile_id: int, changes: Mapping[str, Any]) -> int:
    """Apply `changes` (subset of UPDATABLE_COLUMNS) and return the affected row count."""
    fields = [c for c in UPDATABLE_COLUMNS if c in changes]
    if not fields:
        return 0
    assignments = ", ".join(f"{c} = :{c}" for c in fields)
    params = {c: changes[c] for c in fields}
    params["profile_id"] = int(profile_id)
    result = db.execute(f"UPDATE profile SET {assignments} WHERE profile_id = :profile_id", params)
    return result.rowcount


def promote_profile(db: Database, profile_id: int) -> int:
    result = db.execute(
        "UPDATE profile SET is_admin = :flag WHERE profile_id = :profile_id",
        {"flag": True, "profile_id": int(profile_id)},
    )
    return result.rowcount


__all__ = [
    "UPDATABLE_COLUMNS",
    "create_profile",
    "list_profiles",
    "search_profiles_by_email",
    "get_profile",
    "profile_exists",
    "email_in_use",
    "get_credentials",
    "get_photo",
    "update_profile",
    "promote_profile",
]
