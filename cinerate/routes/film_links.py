"""Film credit routes: actors, directors, producers and genres of a film.

One router factory serves the four link tables. Reads are public; adding and
removing links is admin-only. `{member}` in the paths is the linked resource
(`actor`, `director`, `producer` or `genre`).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from cinerate.db.base import Database, get_database
from cinerate.guards.auth import admin_identity
from cinerate.logic.errors import ConflictError, NotFoundError, storage_errors
from cinerate.logic.identity import Identity
from cinerate.logic.repository_catalog import FILM, exists
from cinerate.logic.repository_film_links import (
    FILM_ACTOR,
    FILM_DIRECTOR,
    FILM_GENRE,
    FILM_PRODUCER,
    FilmLink,
    add_link,
    link_exists,
    list_links,
    remove_links,
)
from cinerate.logic.validation import require_int

logger = logging.getLogger(__name__)


def build_film_link_router(link: FilmLink, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix)
    member = link.member
    segment = member.table
    op = f"FILM_{member.label}"

    def _listing(db: Database, **filters):
        with storage_errors(f"GET_{op}_ERROR", "Failed to fetch film credits."):
            return list_links(db, link, **filters)

    def _removed(affected: int, identity: Identity, **filters) -> dict:
        if affected == 0:
            raise NotFoundError("Relation not found.", code="RELATION_NOT_FOUND")
        logger.info(
            "film_links_removed table=%s filters=%s count=%s admin=%s",
            link.table,
            filters,
            affected,
            identity.profile_id,
        )
        return {"message": "Relation deleted.", "deleted": affected}

    @router.get("", summary="List every link")
    def list_all(db: Database = Depends(get_database)):
        return _listing(db)

    @router.get("/film/{film_id}", summary=f"{member.table.capitalize()}s of one film")
    def by_film(film_id: int, db: Database = Depends(get_database)):
        return _listing(db, film_id=film_id)

    @router.get(f"/film/{{film_id}}/{segment}/{{member_id}}", summary="One link")
    def get_pair(film_id: int, member_id: int, db: Database = Depends(get_database)):
        rows = _listing(db, film_id=film_id, member_id=member_id)
        if not rows:
            raise NotFoundError("Relation not found.", code="RELATION_NOT_FOUND")
        return rows[0]

    @router.get(f"/{segment}/{{member_id}}", summary=f"Films of one {member.table}")
    def by_member(member_id: int, db: Database = Depends(get_database)):
        return _listing(db, member_id=member_id)

    @router.post("", status_code=201, summary="Link a film (admin)")
    def create(payload: dict, identity: Identity = Depends(admin_identity), db: Database = Depends(get_database)):
        film_id = require_int(payload.get("film_id"), "film_id")
        member_id = require_int(payload.get(link.member_key), link.member_key)
        if not exists(db, FILM, film_id):
            raise NotFoundError("Film not found.", code=FILM.not_found_code)
        if not exists(db, member, member_id):
            raise NotFoundError(f"{member.table.capitalize()} not found.", code=member.not_found_code)
        if link_exists(db, link, film_id, member_id):
            raise ConflictError("This relation already exists.", code="RELATION_ALREADY_EXISTS")
        try:
            with storage_errors(f"ADD_{op}_ERROR", "Failed to create relation."):
                add_link(db, link, film_id, member_id)
        except ConflictError as exc:
            raise ConflictError(
                "This relation already exists.", code="RELATION_ALREADY_EXISTS", detail=exc.detail
            ) from exc
        logger.info(
            "film_link_added table=%s film=%s member=%s admin=%s", link.table, film_id, member_id, identity.profile_id
        )
        return {"message": "Relation created.", "film_id": film_id, link.member_key: member_id}

    @router.delete(f"/film/{{film_id}}/{segment}/{{member_id}}", summary="Remove one link (admin)")
    def remove_pair(
        film_id: int,
        member_id: int,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete relation."):
            affected = remove_links(db, link, film_id=film_id, member_id=member_id)
        return _removed(affected, identity, film_id=film_id, member_id=member_id)

    @router.delete("/film/{film_id}", summary="Remove every link of a film (admin)")
    def remove_for_film(
        film_id: int,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete relations."):
            affected = remove_links(db, link, film_id=film_id)
        return _removed(affected, identity, film_id=film_id)

    @router.delete(f"/{segment}/{{member_id}}", summary=f"Remove every link of a {member.table} (admin)")
    def remove_for_member(
        member_id: int,
        identity: Identity = Depends(admin_identity),
        db: Database = Depends(get_database),
    ):
        with storage_errors(f"DELETE_{op}_ERROR", "Failed to delete relations."):
            affected = remove_links(db, link, member_id=member_id)
        return _removed(affected, identity, member_id=member_id)

    return router


film_actors_router = build_film_link_router(FILM_ACTOR, "/film-actors")
film_directors_router = build_film_link_router(FILM_DIRECTOR, "/film-directors")
film_producers_router = build_film_link_router(FILM_PRODUCER, "/film-producers")
film_genres_router = build_film_link_router(FILM_GENRE, "/film-genres")

__all__ = [
    "build_film_link_router",
    "film_actors_router",
    "film_directors_router",
    "film_producers_router",
    "film_genres_router",
]
