"""Shared constants and sample data builders for tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def hours_ago(hours: float, now: datetime = FIXED_NOW) -> str:
    """ISO timestamp `hours` before `now`."""
    return (now - timedelta(hours=hours)).isoformat()


def message(quote_id: str, role: str, hours: float) -> dict:
    """One thread message row, `hours` before FIXED_NOW."""
    return {"quote_id": quote_id, "sender_role": role, "created_at": hours_ago(hours)}
