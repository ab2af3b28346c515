"""Test utilities for the supplier reputation engine.

This package provides:
- Configuration factories (config_mocks.py)
- Fixed clock and sample rows (fixtures.py)
- DuckDB seeding helpers (duckdb_helpers.py)
"""

from .config_mocks import create_engine_config, create_reputation_settings, write_config_dir
from .fixtures import FIXED_NOW, hours_ago, message

__all__ = [
    "FIXED_NOW",
    "create_engine_config",
    "create_reputation_settings",
    "hours_ago",
    "message",
    "write_config_dir",
]
