"""
Centralised settings loader (pydantic-settings).

Every field can be overridden by the upper-cased env var of the same
name, or from `.env`.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / storage ──────────────────────────────────────────
    env_name: str = "local"
    database_url: str = "sqlite+aiosqlite:///./onboarding.sqlite3"
    log_level: str = "INFO"

    # ─── loading screen ─────────────────────────────────────────────
    loading_interval: float = Field(0.05, ge=0)     # seconds per tick
    loading_step: float = Field(0.01, gt=0, le=1)  # counter increment per tick

    # skip restoring persisted state on start-up (state is still written)
    fresh_start: bool = False

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
