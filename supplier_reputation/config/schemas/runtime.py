"""Runtime-supporting configuration schemas (logging, data store)."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "json"
    file_path: str | None = "logs/supplier-reputation.log"
    max_file_size_mb: int = 100
    backup_count: int = 5
    include_stage: bool = True
    include_run_id: bool = True
    include_timestamps: bool = True
    console_enabled: bool = True
    file_enabled: bool = True

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        if not isinstance(value, str):
            return value  # type: ignore[return-value]
        lowered = value.lower()
        if lowered in {"pretty", "text", "plain"}:
            return "text"
        if lowered in {"json", "structured"}:
            return "json"
        return value


class DuckDBConfig(BaseModel):
    """Configuration for the DuckDB-backed signal store."""

    database_path: str = Field(
        default=":memory:", description="DuckDB database file, or ':memory:'"
    )
    read_only: bool = Field(default=True, description="Open file databases read-only")
    threads: int = Field(default=4, ge=1)
    memory_limit_gb: int = Field(default=2, ge=1)


__all__ = ["DuckDBConfig", "LoggingConfig"]
