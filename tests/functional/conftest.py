"""Functional test bootstrap for the CineRate API.

Each test gets its own file-backed SQLite database with the packaged
migrations applied, an application built by `create_app` around it, and a
`Seeder` that writes fixture rows straight through the `Database` handle.
Tokens are minted with the same signer the app uses.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from werkzeug.security import generate_password_hash

from cinerate.config import AppConfig, AuthConfig, DatabaseConfig
from cinerate.db.base import Database, create_database_engine
from cinerate.db.migrations_runner import apply_migrations
from cinerate.logic.identity import issue_token
from cinerate.main import create_app

TEST_SECRET = "functional-test-secret"
DEFAULT_PASSWORD = "s3cret-pass"


class Seeder:
    """Inserts rows for tests and mints tokens for seeded profiles."""

    def __init__(self, db: Database, config: AppConfig) -> None:
        self.db = db
        self.config = config
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        is_admin: bool = False,
        password: str = DEFAULT_PASSWORD,
        profile_id: Optional[int] = None,
    ) -> int:
        n = self._next()
        params: Dict[str, Any] = {
            "name": name or f"User {n}",
            "email": email or f"user{n}@example.com",
            "password_hash": generate_password_hash(password),
            "is_admin": is_admin,
        }
        if profile_id is not None:
            params["profile_id"] = profile_id
            self.db.execute(
                "INSERT INTO profile (profile_id, name, email, biography, password_hash, is_admin) "
                "VALUES (:profile_id, :name, :email, NULL, :password_hash, :is_admin)",
                params,
            )
            return profile_id
        result = self.db.execute(
            "INSERT INTO profile (name, email, biography, password_hash, is_admin) "
            "VALUES (:name, :email, NULL, :password_hash, :is_admin) RETURNING profile_id",
            params,
        )
        return int(result.inserted_id)

    def film(self, name: Optional[str] = None) -> int:
        result = self.db.execute(
            "INSERT INTO film (name, synopsis) VALUES (:name, :synopsis) RETURNING film_id",
            {"name": name or f"Film {self._next()}", "synopsis": "A story."},
        )
        return int(result.inserted_id)

    def actor(self, name: Optional[str] = None) -> int:
        result = self.db.execute(
            "INSERT INTO actor (name, alive) VALUES (:name, :alive) RETURNING actor_id",
            {"name": name or f"Actor {self._next()}", "alive": True},
        )
        return int(result.inserted_id)

    def catalog_entry(self, table: str, name: Optional[str] = None) -> int:
        """Insert a name-only catalog row (director, producer or genre)."""
        result = self.db.execute(
            f"INSERT INTO {table} (name) VALUES (:name) RETURNING {table}_id",
            {"name": name or f"{table.capitalize()} {self._next()}"},
        )
        return int(result.inserted_id)

    def film_link(self, table: str, member_key: str, film_id: int, member_id: int) -> None:
        self.db.execute(
            f"INSERT INTO {table} (film_id, {member_key}) VALUES (:f, :m)",
            {"f": film_id, "m": member_id},
        )

    def comment(self, profile_id: int, film_id: int, body: str = "Great film.") -> int:
        result = self.db.execute(
            "INSERT INTO comment (profile_id, film_id, body) VALUES (:p, :f, :b) RETURNING comment_id",
            {"p": profile_id, "f": film_id, "b": body},
        )
        return int(result.inserted_id)

    def comment_evaluation(self, profile_id: int, comment_id: int, positive: bool = True) -> int:
        row = self.db.fetch_one(
            "SELECT profile_id, film_id FROM comment WHERE comment_id = :id", {"id": comment_id}
        )
        result = self.db.execute(
            "INSERT INTO comment_evaluation "
            "(profile_id, comment_id, comment_profile_id, comment_film_id, positive, negative) "
            "VALUES (:p, :c, :cp, :cf, :pos, :neg) RETURNING evaluation_id",
            {
                "p": profile_id,
                "c": comment_id,
                "cp": row["profile_id"],
                "cf": row["film_id"],
                "pos": positive,
                "neg": not positive,
            },
        )
        return int(result.inserted_id)

    def film_suggestion(self, profile_id: int, name: Optional[str] = None) -> int:
        result = self.db.execute(
            "INSERT INTO film_suggestion (profile_id, name, synopsis) VALUES (:p, :n, :s) RETURNING suggestion_id",
            {"p": profile_id, "n": name or f"Suggested film {self._next()}", "s": None},
        )
        return int(result.inserted_id)

    def actor_suggestion(self, profile_id: int, name: Optional[str] = None) -> int:
        result = self.db.execute(
            "INSERT INTO actor_suggestion (profile_id, name) VALUES (:p, :n) RETURNING suggestion_id",
            {"p": profile_id, "n": name or f"Suggested actor {self._next()}"},
        )
        return int(result.inserted_id)

    def suggestion_evaluation(self, table: str, profile_id: int, suggestion_id: int, positive: bool = True) -> int:
        result = self.db.execute(
            f"INSERT INTO {table} (profile_id, suggestion_id, positive, negative) "
            "VALUES (:p, :s, :pos, :neg) RETURNING evaluation_id",
            {"p": profile_id, "s": suggestion_id, "pos": positive, "neg": not positive},
        )
        return int(result.inserted_id)

    def film_evaluation(self, profile_id: int, film_id: int, positive: bool = True) -> int:
        result = self.db.execute(
            "INSERT INTO film_evaluation (profile_id, film_id, positive, negative) "
            "VALUES (:p, :f, :pos, :neg) RETURNING evaluation_id",
            {"p": profile_id, "f": film_id, "pos": positive, "neg": not positive},
        )
        return int(result.inserted_id)

    def actor_evaluation(self, profile_id: int, actor_id: int, positive: bool = True) -> int:
        result = self.db.execute(
            "INSERT INTO actor_evaluation (profile_id, actor_id, positive, negative) "
            "VALUES (:p, :a, :pos, :neg) RETURNING evaluation_id",
            {"p": profile_id, "a": actor_id, "pos": positive, "neg": not positive},
        )
        return int(result.inserted_id)

    def favorite_film(self, profile_id: int, film_id: int) -> None:
        self.db.execute(
            "INSERT INTO favorite_film (profile_id, film_id) VALUES (:p, :f)",
            {"p": profile_id, "f": film_id},
        )

    def favorite_actor(self, profile_id: int, actor_id: int) -> None:
        self.db.execute(
            "INSERT INTO favorite_actor (profile_id, actor_id) VALUES (:p, :a)",
            {"p": profile_id, "a": actor_id},
        )

    def token(self, profile_id: int, is_admin: bool = False) -> str:
        return issue_token(
            self.config.auth,
            {"profile_id": profile_id, "email": f"{profile_id}@tokens.test", "is_admin": is_admin},
        )

    def headers(self, profile_id: int, is_admin: bool = False) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token(profile_id, is_admin=is_admin)}"}

    def count(self, table: str, where: str = "1 = 1", **params: Any) -> int:
        row = self.db.fetch_one(f"SELECT COUNT(*) AS n FROM {table} WHERE {where}", params)
        return int(row["n"])


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(url=f"sqlite+pysqlite:///{tmp_path / 'cinerate_test.db'}", auto_migrate=False),
        auth=AuthConfig(jwt_secret=TEST_SECRET, token_ttl_seconds=600),
    )


@pytest.fixture
def database(app_config):
    db = Database(create_database_engine(app_config.database.url))
    apply_migrations(db.engine)
    yield db
    db.dispose()


@pytest.fixture
def app(app_config, database):
    return create_app(app_config, database=database)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def seed(database, app_config) -> Seeder:
    return Seeder(database, app_config)
