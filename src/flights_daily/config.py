"""Settings loader backed by environment variables.

``get_settings`` reads the ``FLIGHTS_*`` environment variables once and
caches the resulting :class:`Settings` object.  Tests that tweak the
environment at runtime call ``reset_settings_cache`` to force a reload.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from functools import lru_cache


@dataclass
class Settings:
    dataset_path: str | None = None
    artifacts_dir: str | None = None
    log_level: str = "INFO"
    robust_maxiter: int = 50


@lru_cache()
def get_settings() -> Settings:
    """Return settings loaded from environment variables."""

    dataset_path = os.getenv("FLIGHTS_DATASET_PATH")
    artifacts_dir = os.getenv("FLIGHTS_ARTIFACTS_DIR")
    log_level = os.getenv("FLIGHTS_LOG_LEVEL", "INFO").upper()
    robust_maxiter = int(os.getenv("FLIGHTS_ROBUST_MAXITER", "50"))
    return Settings(
        dataset_path=dataset_path,
        artifacts_dir=artifacts_dir,
        log_level=log_level,
        robust_maxiter=robust_maxiter,
    )


def reset_settings_cache() -> None:
    """Clear the settings cache (mainly for tests)."""

    get_settings.cache_clear()
