"""Film credit links: which actors, directors, producers and genres a film has.

Each link table pairs `film_id` with the primary key of one catalog resource.
Reads join both sides so rows carry the film name and the member name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cinerate.db.base import Database
from cinerate.logic.repository_catalog import ACTOR, DIRECTOR, GENRE, PRODUCER, CatalogResource


@dataclass(frozen=True)
class FilmLink:
    table: str
    member: CatalogResource

    @property
    def member_key(self) -> str:
        return self.member.pk

    @property
    def member_name(self) -> str:
        return f"{self.member.table}_name"


FILM_ACTOR = FilmLink(table="film_actor", member=ACTOR)
FILM_DIRECTOR = FilmLink(table="film_director", member=DIRECTOR)
FILM_PRODUCER = FilmLink(table="film_producer", member=PRODUCER)
FILM_GENRE = FilmLink(table="film_genre", member=GENRE)


def _filters(link: FilmLink, film_id: Optional[int], member_id: Optional[int], alias: str = ""):
    clauses: List[str] = []
    params: Dict[str, Any] = {}
    if film_id is not None:
        clauses.append(f"{alias}film_id = :film_id")
        params["film_id"] = int(film_id)
    if member_id is not None:
        clauses.append(f"{alias}{link.member_key} = :member_id")
        params["member_id"] = int(member_id)
    return clauses, params


def list_links(
    db: Database,
    link: FilmLink,
    film_id: Optional[int] = None,
    member_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    member = link.member
    clauses, params = _filters(link, film_id, member_id, alias="l.")
    sql = (
        f"SELECT l.film_id, f.name AS film_name, l.{member.pk}, m.name AS {link.member_name} "
        f"FROM {link.table} l "
        f"JOIN film f ON f.film_id = l.film_id "
        f"JOIN {member.table} m ON m.{member.pk} = l.{member.pk}"
    )
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += f" ORDER BY l.film_id, l.{member.pk}"
    return db.fetch_all(sql, params)


def link_exists(db: Database, link: FilmLink, film_id: int, member_id: int) -> bool:
    row = db.fetch_one(
        f"SELECT 1 AS present FROM {link.table} WHERE film_id = :film_id AND {link.member_key} = :member_id",
        {"film_id": int(film_id), "member_id": int(member_id)},
    )
    return row is not None


def add_link(db: Database, link: FilmLink, film_id: int, member_id: int) -> None:
    db.execute(
        f"INSERT INTO {link.table} (film_id, {link.member_key}) VALUES (:film_id, :member_id)",
        {"film_id": int(film_id), "member_id": int(member_id)},
    )


def remove_links(
    db: Database,
    link: FilmLink,
    film_id: Optional[int] = None,
    member_id: Optional[int] = None,
) -> int:
    """Delete the links matching the given film and/or member; at least one is required."""
    clauses, params = _filters(link, film_id, member_id)
    if not clauses:
        raise ValueError("remove_links needs film_id or member_id")
    return db.execute(f"DELETE FROM {link.table} WHERE " + " AND ".join(clauses), params).rowcount


__all__ = [
    "FilmLink",
    "FILM_ACTOR",
    "FILM_DIRECTOR",
    "FILM_PRODUCER",
    "FILM_GENRE",
    "list_links",
    "link_exists",
    "add_link",
    "remove_links",
]
