"""Configuration management for condense tables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage configuration."""

    data_dir: Path = Field(default=Path("db"), description="Default directory for table files")
    file_suffix: str = Field(default=".dat", description="Suffix appended to table names")
    fsync: bool = Field(default=True, description="fsync table files before replacing them")

    @field_validator("file_suffix")
    @classmethod
    def _suffix_starts_with_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError(f"file_suffix must look like '.ext', got {value!r}")
        return value


class EncryptionConfig(BaseModel):
    """Password-based encryption configuration."""

    kdf_iterations: int = Field(
        default=200_000, ge=1, description="PBKDF2-HMAC-SHA256 iterations per seal/open"
    )
    salt_size: int = Field(default=16, ge=8, le=64, description="Random salt size in bytes")


class QueryConfig(BaseModel):
    """Query layer configuration."""

    in_equality: Literal["strict", "loose"] = Field(
        default="strict", description="Default comparison used by where_in()"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="condense", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for condense tables."""

    model_config = SettingsConfigDict(
        env_prefix="CONDENSE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    encryption: EncryptionConfig = Field(default_factory=EncryptionConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the default data directory exists."""
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
