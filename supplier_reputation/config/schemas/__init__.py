"""Modular configuration schemas for the supplier reputation engine."""

from .engine import EngineConfig, EngineMetadata
from .reputation import FeedbackConfig, KickoffConfig, ReputationSettings, ResponsivenessConfig
from .runtime import DuckDBConfig, LoggingConfig


__all__ = [
    "DuckDBConfig",
    "EngineConfig",
    "EngineMetadata",
    "FeedbackConfig",
    "KickoffConfig",
    "LoggingConfig",
    "ReputationSettings",
    "ResponsivenessConfig",
]
