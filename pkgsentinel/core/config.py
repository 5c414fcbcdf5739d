"""Runtime settings read from ``PKGSENTINEL_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_MAX_DEPTH = 4


@dataclass(frozen=True)
class Settings:
    max_depth: int = DEFAULT_MAX_DEPTH
    scan_concurrency: int = 8
    git_timeout: float = 10.0
    fetch_timeout: float = 5.0
    install_timeout: float = 600.0
    remote_timeout: float = 60.0
    git_remote: str = "origin"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])


def _env_int(key: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("config.invalid_value", key=key, value=raw, default=default)
        return default
    if value < minimum:
        logger.warning("config.out_of_range", key=key, value=value, default=default)
        return default
    return value


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("config.invalid_value", key=key, value=raw, default=default)
        return default
    if value <= 0:
        logger.warning("config.out_of_range", key=key, value=value, default=default)
        return default
    return value


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment, falling back to defaults."""
    cors = os.environ.get("PKGSENTINEL_CORS_ORIGINS", "http://localhost:3000")
    return Settings(
        max_depth=_env_int("PKGSENTINEL_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        scan_concurrency=_env_int("PKGSENTINEL_SCAN_CONCURRENCY", 8, minimum=1),
        git_timeout=_env_float("PKGSENTINEL_GIT_TIMEOUT", 10.0),
        fetch_timeout=_env_float("PKGSENTINEL_FETCH_TIMEOUT", 5.0),
        install_timeout=_env_float("PKGSENTINEL_INSTALL_TIMEOUT", 600.0),
        remote_timeout=_env_float("PKGSENTINEL_REMOTE_TIMEOUT", 60.0),
        git_remote=os.environ.get("PKGSENTINEL_GIT_REMOTE", "origin").strip() or "origin",
        cors_origins=[o.strip() for o in cors.split(",") if o.strip()],
    )
