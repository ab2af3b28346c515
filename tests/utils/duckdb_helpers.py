"""Seeding helpers for DuckDB-backed tests."""

import pandas as pd

from supplier_reputation.utils.duckdb_client import DuckDBClient


def run_script(client: DuckDBClient, statements: str) -> None:
    """Run `;`-separated DDL/DML statements against the client's database."""
    with client.connection() as conn:
        for statement in statements.split(";"):
            if statement.strip():
                conn.execute(statement)


def load_frame(client: DuckDBClient, df: pd.DataFrame, table_name: str) -> int:
    """Create (or replace) `table_name` from a DataFrame; returns its row count."""
    with client.connection() as conn:
        conn.register("temp_df", df)
        try:
            conn.execute(f"CREATE OR REPLACE TABLE {table_name} AS SELECT * FROM temp_df")
            row = conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()
        finally:
            conn.unregister("temp_df")
    return row[0] if row else 0


def relation_exists(client: DuckDBClient, name: str) -> bool:
    rows = client.execute_query(
        "SELECT table_name FROM information_schema.tables WHERE table_name = ?",
        [name],
    )
    return len(rows) > 0
