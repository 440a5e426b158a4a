"""CineRate API: a movie-rating REST service.

Exposes the FastAPI application factory. Business logic lives in
`cinerate/logic/` and route handlers in `cinerate/routes/`.
"""

from __future__ import annotations

from cinerate.main import create_app

__all__ = ["create_app"]
