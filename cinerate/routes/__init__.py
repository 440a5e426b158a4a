"""APIRouter registration for the CineRate API."""

from __future__ import annotations

from fastapi import APIRouter

from cinerate.routes.auth import router as auth_router
from cinerate.routes.catalog import actors_router, directors_router, films_router, genres_router, producers_router
from cinerate.routes.comments import router as comments_router
from cinerate.routes.evaluations import evaluation_routers
from cinerate.routes.favorites import favorite_actors_router, favorite_films_router
from cinerate.routes.film_links import (
    film_actors_router,
    film_directors_router,
    film_genres_router,
    film_producers_router,
)
from cinerate.routes.profiles import router as profiles_router
from cinerate.routes.suggestions import actor_suggestions_router, film_suggestions_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["Auth"])
api_router.include_router(profiles_router, tags=["Profiles"])
api_router.include_router(films_router, tags=["Catalog"])
api_router.include_router(actors_router, tags=["Catalog"])
api_router.include_router(directors_router, tags=["Catalog"])
api_router.include_router(producers_router, tags=["Catalog"])
api_router.include_router(genres_router, tags=["Catalog"])
for _router in (film_actors_router, film_directors_router, film_producers_router, film_genres_router):
    api_router.include_router(_router, tags=["Film credits"])
api_router.include_router(film_suggestions_router, tags=["Suggestions"])
api_router.include_router(actor_suggestions_router, tags=["Suggestions"])
api_router.include_router(comments_router, tags=["Comments"])
for _router in evaluation_routers:
    api_router.include_router(_router, tags=["Evaluations"])
api_router.include_router(favorite_films_router, tags=["Favorites"])
api_router.include_router(favorite_actors_router, tags=["Favorites"])

__all__ = ["api_router"]
