"""Root EngineConfig composed from modular schema components."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .reputation import ReputationSettings
from .runtime import DuckDBConfig, LoggingConfig


class EngineMetadata(BaseModel):
    """Metadata for the configured engine."""

    name: str = Field(default="supplier-reputation", description="Engine identifier")
    version: str = Field(default="0.1.0", description="Semantic version of the rubric/engine")
    environment: str = Field(default="development", description="Active environment name")

    model_config = ConfigDict(extra="allow")


class EngineConfig(BaseModel):
    """Root configuration model for the supplier reputation engine."""

    engine: EngineMetadata = Field(default_factory=EngineMetadata)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reputation: ReputationSettings = Field(default_factory=ReputationSettings)
    duckdb: DuckDBConfig = Field(default_factory=DuckDBConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="allow",
    )


__all__ = ["EngineConfig", "EngineMetadata"]
