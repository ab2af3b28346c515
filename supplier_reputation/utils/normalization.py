"""Coercion helpers for loosely typed aggregate rows."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

# Values that should be treated as missing
NULL_VALUES = {"", "\\n", "nan", "nat", "none", "null"}


def normalize_id(value: Any) -> str:
    """Trim a string identifier; anything that is not a string becomes ''."""
    return value.strip() if isinstance(value, str) else ""


def normalize_supplier_ids(ids: Iterable[Any] | None) -> list[str]:
    """Trim, drop empties and de-duplicate ids, keeping first-seen order."""
    if ids is None or isinstance(ids, str | bytes):
        return []
    seen: dict[str, None] = {}
    for raw in ids:
        normalized = normalize_id(raw)
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


def to_number_or_none(value: Any) -> float | None:
    """Finite float from a number or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if s.lower() in NULL_VALUES:
            return None
        try:
            number = float(s)
        except ValueError:
            return None
    else:
        try:
            number = float(value)  # Decimal, numpy scalars
        except (TypeError, ValueError):
            return None
    return number if math.isfinite(number) else None


def to_count_or_none(value: Any) -> int | None:
    """Non-negative floored integer, or None when the value is not numeric."""
    number = to_number_or_none(value)
    if number is None:
        return None
    return max(0, math.floor(number))


def to_count(value: Any) -> int:
    """Like `to_count_or_none` but missing values count as zero."""
    count = to_count_or_none(value)
    return 0 if count is None else count


def normalize_label(value: Any) -> str:
    """Lower-cased, trimmed string; '' for non-strings."""
    return value.strip().lower() if isinstance(value, str) else ""


def normalize_category(value: Any) -> str | None:
    normalized = normalize_label(value)
    return normalized or None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime.

    Naive datetimes (DuckDB TIMESTAMP columns) are taken to be UTC. ISO strings
    with a trailing 'Z' are accepted. Unparseable values return None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        s = value.strip()
        if not s or s.lower() in NULL_VALUES:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_naive_utc(value: datetime) -> datetime:
    """Aware datetime -> naive UTC, for comparison against TIMESTAMP columns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)
