"""Pydantic-based runtime settings for the claims engine.

Loads from environment variables (with optional .env file).
Invalid values fail fast on first access.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class FactProviderKind(str, Enum):
    sqlite = "sqlite"
    memory = "memory"


class RuntimeSettings(BaseSettings):
    """All configuration for claim resolution, validated at startup."""

    model_config = {"env_prefix": "", "env_file": ".env", "env_file_encoding": "utf-8"}

    # --- Fact provider ---
    fact_provider: FactProviderKind = Field(
        default=FactProviderKind.sqlite,
        description="Backing store: 'sqlite' database or 'memory' JSON dataset",
    )
    claims_db_path: str = Field(
        default="data/claims.db",
        description="SQLite path for claim data",
    )
    claims_dataset_path: str = Field(
        default="data/sample_claims.json",
        description="JSON dataset used by the in-memory provider",
    )
    sqlite_timeout_seconds: float = Field(
        default=5.0, gt=0, description="SQLite busy timeout per connection"
    )

    # --- Matrix ---
    matrix_default_row_limit: int = Field(
        default=200, ge=1, description="Rows returned when the caller gives no limit"
    )
    matrix_max_row_limit: int = Field(
        default=1000, ge=1, description="Hard cap on matrix rows regardless of caller value"
    )
    matrix_max_workers: int = Field(
        default=8,
        description="Per-product fan-out pool size (match the provider's connection limit)",
    )

    # --- Limits ---
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout")

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Root log level for CLI and MCP entrypoints")

    @field_validator("matrix_max_workers")
    @classmethod
    def _workers_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"matrix_max_workers must be >= 1, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def _default_within_cap(self) -> RuntimeSettings:
        if self.matrix_default_row_limit > self.matrix_max_row_limit:
            raise ValueError(
                "matrix_default_row_limit "
                f"({self.matrix_default_row_limit}) exceeds matrix_max_row_limit ({self.matrix_max_row_limit})"
            )
        return self

    def clamp_row_limit(self, requested: int | None) -> int:
        """Apply the default and the hard cap to a caller-supplied row limit."""
        if requested is None or requested < 1:
            return self.matrix_default_row_limit
        return min(requested, self.matrix_max_row_limit)


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return the singleton RuntimeSettings (cached after first call)."""
    return RuntimeSettings()
