from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _get_env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"Environment variable {name} must be an int, got: {raw!r}") from e
    return value


def _get_env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw


def _get_env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got: {raw!r}")


def _get_env_list(name: str, default: str) -> tuple[str, ...]:
    raw = _get_env_str(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class CorsSettings:
    allow_origins: tuple[str, ...]
    allow_methods: tuple[str, ...]
    allow_headers: tuple[str, ...]
    allow_credentials: bool


@dataclass(frozen=True)
class Settings:
    # Database
    db_path: Path
    migrations_dir: Path

    # Server (used by todolist.main when starting uvicorn programmatically)
    host: str
    port: int
    log_level: str

    cors: CorsSettings


def load_settings() -> Settings:
    """
    Loads settings from env vars with sane defaults.

    Env vars:
      - TODOLIST_DB_PATH (default: ./var/todolist.db)
      - TODOLIST_MIGRATIONS_DIR (default: ./migrations)
      - TODOLIST_HOST (default: 127.0.0.1)
      - TODOLIST_PORT (default: 8080)
      - TODOLIST_LOG_LEVEL (default: info)
      - TODOLIST_CORS_ORIGINS (default: http://localhost:4200)
      - TODOLIST_CORS_METHODS (default: GET,POST,PUT,DELETE,OPTIONS)
      - TODOLIST_CORS_HEADERS (default: *)
      - TODOLIST_CORS_ALLOW_CREDENTIALS (default: true)
    """
    db_path = Path(_get_env_str("TODOLIST_DB_PATH", "./var/todolist.db")).expanduser()
    migrations_dir = Path(_get_env_str("TODOLIST_MIGRATIONS_DIR", "./migrations")).expanduser()

    host = _get_env_str("TODOLIST_HOST", "127.0.0.1")
    port = _get_env_int("TODOLIST_PORT", 8080)
    if not (1 <= port <= 65535):
        raise ValueError("TODOLIST_PORT must be between 1 and 65535")

    log_level = _get_env_str("TODOLIST_LOG_LEVEL", "info").lower()

    origins = _get_env_list("TODOLIST_CORS_ORIGINS", "http://localhost:4200")
    if not origins:
        raise ValueError("TODOLIST_CORS_ORIGINS must list at least one origin")

    cors = CorsSettings(
        allow_origins=origins,
        allow_methods=_get_env_list("TODOLIST_CORS_METHODS", "GET,POST,PUT,DELETE,OPTIONS"),
        allow_headers=_get_env_list("TODOLIST_CORS_HEADERS", "*"),
        allow_credentials=_get_env_bool("TODOLIST_CORS_ALLOW_CREDENTIALS", True),
    )

    return Settings(
        db_path=db_path,
        migrations_dir=migrations_dir,
        host=host,
        port=port,
        log_level=log_level,
        cors=cors,
    )
