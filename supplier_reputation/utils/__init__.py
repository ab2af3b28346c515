"""Shared utilities: logging, async helpers, coercion and DuckDB access."""
