"""Configuration utilities for the CineRate API.

This module loads application configuration with the following rules:
- Primary source: `cinerate_config.json` at the project root.
- Overrides: environment variables (a local `.env` is loaded first), then
  optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("cinerate_config.json")
DEFAULT_DATABASE_URL = "sqlite+pysqlite:///./cinerate.db"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _truthy(value: object) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    url: str
    echo: bool = Field(default=False)
    auto_migrate: bool = Field(default=True)

    @field_validator("url")
    @classmethod
    def url_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.url must be a non-empty string")
        return v


class AuthConfig(BaseModel):
    jwt_secret: str
    algorithm: str = Field(default="HS256")
    token_ttl_seconds: int = Field(default=3600, gt=0)
    cookie_name: str = Field(default="token")
    cookie_secure: bool = Field(default=False)

    @field_validator("jwt_secret")
    @classmethod
    def secret_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("auth.jwt_secret must be a non-empty string")
        return v

    @field_validator("algorithm")
    @classmethod
    def algorithm_must_be_hmac(cls, v: str) -> str:
        allowed = {"HS256", "HS384", "HS512"}
        if v not in allowed:
            raise ValueError(f"auth.algorithm must be one of {sorted(allowed)}")
        return v


class AppConfig(BaseModel):
    database: DatabaseConfig
    auth: AuthConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables (including those loaded from `.env`)
    2) Text files in `config/` (optional)
    3) cinerate_config.json at project root
    4) Safe defaults for development
    """
    load_dotenv()
    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Database
    url = _env("DATABASE_URL") or _read_config_file("database.url") or _base("database.url") or DEFAULT_DATABASE_URL
    echo_text = _env("DATABASE_ECHO") or _read_config_file("database.echo") or _base("database.echo", "false")
    migrate_text = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("database.auto_migrate") or _base("database.auto_migrate", "true")

    # Auth
    secret = _env("JWT_SECRET") or _read_config_file("auth.jwt_secret") or _base("auth.jwt_secret") or ""
    algorithm = (_env("JWT_ALGORITHM") or _base("auth.algorithm", "HS256") or "HS256").strip()
    ttl_text = _env("TOKEN_TTL_SECONDS") or _read_config_file("auth.token_ttl_seconds") or _base("auth.token_ttl_seconds", "3600")
    cookie_name = _env("AUTH_COOKIE_NAME") or _base("auth.cookie_name", "token")
    cookie_secure_text = _env("AUTH_COOKIE_SECURE") or _base("auth.cookie_secure", "false")

    try:
        return AppConfig(
            database=DatabaseConfig(
                url=url,
                echo=_truthy(echo_text),
                auto_migrate=_truthy(migrate_text),
            ),
            auth=AuthConfig(
                jwt_secret=secret,
                algorithm=algorithm,
                token_ttl_seconds=int(str(ttl_text).strip()),
                cookie_name=str(cookie_name),
                cookie_secure=_truthy(cookie_secure_text),
            ),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "AuthConfig",
    "load_config",
]
