"""
Settings - Environment-driven configuration for the scheduling optimizer.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""
    catalog_url: str = ""           # PostgREST base URL, empty = built-in catalog
    catalog_token: str = "demo"
    catalog_timeout: float = 5.0    # seconds
    default_seed: int = 42
    max_workers: int = 0            # 0/1 = rank locations sequentially
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build a fresh Settings object from the current environment."""
    max_workers = _int_env("GREENSLOT_MAX_WORKERS", 0)
    if max_workers < 0:
        raise ValueError("GREENSLOT_MAX_WORKERS must be >= 0")

    timeout = _float_env("GREENSLOT_CATALOG_TIMEOUT", 5.0)
    if timeout <= 0:
        raise ValueError("GREENSLOT_CATALOG_TIMEOUT must be > 0")

    return Settings(
        catalog_url=os.getenv("GREENSLOT_CATALOG_URL", "").rstrip("/"),
        catalog_token=os.getenv("GREENSLOT_CATALOG_TOKEN", "demo"),
        catalog_timeout=timeout,
        default_seed=_int_env("GREENSLOT_DEFAULT_SEED", 42),
        max_workers=max_workers,
        log_level=os.getenv("GREENSLOT_LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return load_settings()
