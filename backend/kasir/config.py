# backend/kasir/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive(name: str, default, cast=float):
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        return default
    # Non-positive values fall back to the default
    if value <= 0:
        return default
    return value


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Storage backend: in-memory unless USE_DATABASE is set
    USE_DATABASE = _env_bool("USE_DATABASE", False)

    # SQLite DB stored in backend/instance/kasir.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///kasir.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Create missing tables at startup; turn off when schema is managed with `flask db upgrade`
    AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", True)

    # Per-client token bucket
    RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)
    RATE_LIMIT_RPS = _env_positive("RATE_LIMIT_RPS", 10.0)
    RATE_LIMIT_BURST = _env_positive("RATE_LIMIT_BURST", 20, cast=int)
    RATE_LIMIT_IDLE_SECONDS = 180

    # Check-and-decrement stock in one store call during checkout
    ATOMIC_CHECKOUT = _env_bool("ATOMIC_CHECKOUT", False)

    # 1 MiB request bodies
    MAX_CONTENT_LENGTH = 1 << 20

    DEFAULT_PAGE_LIMIT = 10
    MAX_PAGE_LIMIT = 100
