from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List
from urllib.parse import urlsplit

_BACKENDS = {"mongo", "memory"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - MONGO_URI: MongoDB connection string. Default 'mongodb://localhost:27017/todos'
    - MONGO_DB_NAME: database name; defaults to the database in MONGO_URI, else 'todos'
    - PORT: listening port (default 5000)
    - HOST: bind address (default '0.0.0.0')
    - PERSISTENCE_BACKEND: 'mongo' (default) or 'memory'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: DEBUG, INFO (default), WARNING or ERROR
    """

    mongo_uri: str
    mongo_db_name: str
    port: int
    host: str
    persistence_backend: str
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value.strip() == "":
        return default
    return value


def _parse_port(value: str, default: int = 5000) -> int:
    try:
        port = int(value.strip())
    except ValueError:
        return default
    if not (0 < port < 65536):
        return default
    return port


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _database_from_uri(uri: str, default: str = "todos") -> str:
    path = urlsplit(uri).path.lstrip("/")
    return path or default


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "mongo").strip().lower()
    if backend not in _BACKENDS:
        backend = "mongo"

    mongo_uri = _get_env("MONGO_URI", "mongodb://localhost:27017/todos").strip()
    db_name = _get_env("MONGO_DB_NAME", _database_from_uri(mongo_uri)).strip()

    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        mongo_uri=mongo_uri,
        mongo_db_name=db_name,
        port=_parse_port(_get_env("PORT", "5000")),
        host=_get_env("HOST", "0.0.0.0").strip(),
        persistence_backend=backend,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=log_level,
    )
