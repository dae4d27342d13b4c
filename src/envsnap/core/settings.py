"""Centralized collector configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed collector configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `ENVSNAP_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    scroll_debounce_ms : int
        Quiet period after the last scroll event before a "scroll" snapshot
        is taken; maps from `ENVSNAP_SCROLL_DEBOUNCE_MS`.
    history_limit : int
        Maximum number of interaction records kept per collector (oldest are
        evicted first, 0 disables recording); maps from `ENVSNAP_HISTORY_LIMIT`.
    log_snapshots : bool
        Emit a DEBUG line for every produced snapshot; maps from
        `ENVSNAP_LOG_SNAPSHOTS`.
    """

    environment: EnvName = Field(default="dev", alias="ENVSNAP_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    scroll_debounce_ms: int = Field(default=200, ge=0, alias="ENVSNAP_SCROLL_DEBOUNCE_MS")
    history_limit: int = Field(default=500, ge=0, alias="ENVSNAP_HISTORY_LIMIT")
    log_snapshots: bool = Field(default=True, alias="ENVSNAP_LOG_SNAPSHOTS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def scroll_debounce_seconds(self) -> float:
        """Debounce window converted for `loop.call_later`."""
        return self.scroll_debounce_ms / 1000.0

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    os.environ.setdefault("ENVSNAP_ENV", "dev")
    return Settings()


# Import-time read of env / .env files.
settings: Settings = load_settings()


def get_logger(name: str = "envsnap") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
