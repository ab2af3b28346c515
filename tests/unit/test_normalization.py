"""Unit tests for row coercion helpers."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from supplier_reputation.utils.normalization import (
    normalize_category,
    normalize_id,
    normalize_supplier_ids,
    parse_timestamp,
    to_count,
    to_count_or_none,
    to_naive_utc,
    to_number_or_none,
)


pytestmark = pytest.mark.fast


class TestIds:
    def test_normalize_id(self):
        assert normalize_id("  sup-1 ") == "sup-1"
        assert normalize_id(42) == ""
        assert normalize_id(None) == ""

    def test_normalize_supplier_ids_dedupes_in_order(self):
        assert normalize_supplier_ids([" b", "a", "b ", "", None, 7, "a"]) == ["b", "a"]

    @pytest.mark.parametrize("value", [None, "sup-1", b"sup-1", []])
    def test_normalize_supplier_ids_degenerate_inputs(self, value):
        assert normalize_supplier_ids(value) == []

    def test_normalize_supplier_ids_accepts_generators(self):
        assert normalize_supplier_ids(s for s in ["x", "y"]) == ["x", "y"]


class TestNumbers:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, 3.0),
            ("4.5", 4.5),
            (" 7 ", 7.0),
            (Decimal("2.25"), 2.25),
            ("", None),
            ("null", None),
            ("abc", None),
            (True, None),
            (float("nan"), None),
            (float("-inf"), None),
            (object(), None),
        ],
    )
    def test_to_number_or_none(self, value, expected):
        assert to_number_or_none(value) == expected

    def test_counts_floor_and_clip(self):
        assert to_count_or_none(3.9) == 3
        assert to_count_or_none(-4) == 0
        assert to_count_or_none(None) is None
        assert to_count(None) == 0
        assert to_count("12") == 12

    def test_normalize_category(self):
        assert normalize_category(" Scope_Unclear ") == "scope_unclear"
        assert normalize_category("  ") is None
        assert normalize_category(5) is None


class TestTimestamps:
    def test_naive_datetime_is_utc(self):
        assert parse_timestamp(datetime(2024, 1, 2, 3, 4)) == datetime(2024, 1, 2, 3, 4, tzinfo=UTC)

    def test_aware_datetime_converted_to_utc(self):
        value = datetime(2024, 1, 2, 5, 0, tzinfo=timezone(timedelta(hours=2)))
        assert parse_timestamp(value) == datetime(2024, 1, 2, 3, 0, tzinfo=UTC)

    @pytest.mark.parametrize(
        "value",
        ["2024-01-02T03:04:00Z", "2024-01-02T03:04:00+00:00", "2024-01-02 03:04:00"],
    )
    def test_iso_strings(self, value):
        assert parse_timestamp(value) == datetime(2024, 1, 2, 3, 4, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "not a date", 1700000000, "NaT"])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None

    def test_to_naive_utc(self):
        aware = datetime(2024, 1, 2, 5, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2024, 1, 2, 3, 0)
        assert to_naive_utc(datetime(2024, 1, 1)) == datetime(2024, 1, 1)
