"""DuckDB-backed signal sources over the marketplace's aggregate relations.

Relations read (all optional; a missing one degrades only its own signal):

- supplier_match_health_summary (view): supplier_id, rfqs_bid_90d, rfqs_won_90d,
  win_rate_pct_90d, match_health
- supplier_bench_utilization_summary (view): supplier_id, bench_status,
  awards_last_30d, last_capacity_update_at
- quotes: id, awarded_supplier_id, awarded_at, kickoff_completed_at
- supplier_bids: supplier_id, quote_id, created_at
- quote_messages: id, quote_id, created_at, sender_role
- quote_rfq_feedback: quote_id, supplier_id, categories (VARCHAR[]), created_at

Queries run on worker threads via asyncio.to_thread; DuckDB catalog/binder
errors (missing relation or column) become SourceUnavailableError, any other
DuckDB error becomes SourceFetchError.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

import duckdb

from ..exceptions import SourceFetchError, SourceUnavailableError, wrap_exception
from ..loaders.responsiveness import build_thread_rollups
from ..models.reputation_models import (
    BenchUtilizationRecord,
    KickoffSummary,
    MatchHealthRecord,
    ThreadActivity,
)
from ..utils.duckdb_client import DuckDBClient
from ..utils.normalization import (
    normalize_category,
    normalize_id,
    parse_timestamp,
    to_naive_utc,
)

MATCH_VIEW = "supplier_match_health_summary"
BENCH_VIEW = "supplier_bench_utilization_summary"
QUOTES_TABLE = "quotes"
BIDS_TABLE = "supplier_bids"
MESSAGES_TABLE = "quote_messages"
FEEDBACK_TABLE = "quote_rfq_feedback"

FEEDBACK_ROW_LIMIT = 20000


def _placeholders(values: Sequence[Any]) -> str:
    return ", ".join("?" for _ in values)


class _DuckDBSource:
    source_name = "duckdb"
    relation = ""

    def __init__(self, client: DuckDBClient):
        self.client = client

    def _query(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        try:
            return self.client.execute_query(sql, params)
        except (duckdb.CatalogException, duckdb.BinderException) as exc:
            raise wrap_exception(
                exc,
                SourceUnavailableError,
                message=f"{self.relation} is not available",
                source=self.source_name,
                relation=self.relation,
                operation="query",
            ) from exc
        except duckdb.Error as exc:
            raise wrap_exception(
                exc,
                SourceFetchError,
                message=f"{self.relation} lookup failed",
                source=self.source_name,
                relation=self.relation,
                operation="query",
                details={"param_count": len(params)},
            ) from exc

    async def _fetch(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._query, sql, params)


class DuckDBMatchHealthSource(_DuckDBSource):
    source_name = "match_health"
    relation = MATCH_VIEW

    async def get(self, supplier_ids: Sequence[str]) -> dict[str, MatchHealthRecord]:
        if not supplier_ids:
            return {}
        rows = await self._fetch(
            f"""
            SELECT supplier_id, rfqs_bid_90d, rfqs_won_90d, win_rate_pct_90d, match_health
            FROM {MATCH_VIEW}
            WHERE supplier_id IN ({_placeholders(supplier_ids)})
            """,
            list(supplier_ids),
        )
        out: dict[str, MatchHealthRecord] = {}
        for row in rows:
            supplier_id = normalize_id(row.get("supplier_id"))
            if not supplier_id:
                continue
            out[supplier_id] = MatchHealthRecord(
                bids_90d=row.get("rfqs_bid_90d"),
                wins_90d=row.get("rfqs_won_90d"),
                win_rate_pct=row.get("win_rate_pct_90d"),
                match_health=row.get("match_health"),
            )
        return out


class DuckDBBenchUtilizationSource(_DuckDBSource):
    source_name = "bench_utilization"
    relation = BENCH_VIEW

    async def get(self, supplier_ids: Sequence[str]) -> dict[str, BenchUtilizationRecord]:
        if not supplier_ids:
            return {}
        rows = await self._fetch(
            f"""
            SELECT supplier_id, bench_status, awards_last_30d, last_capacity_update_at
            FROM {BENCH_VIEW}
            WHERE supplier_id IN ({_placeholders(supplier_ids)})
            """,
            list(supplier_ids),
        )
        out: dict[str, BenchUtilizationRecord] = {}
        for row in rows:
            supplier_id = normalize_id(row.get("supplier_id"))
            if not supplier_id:
                continue
            out[supplier_id] = BenchUtilizationRecord(
                bench_status=row.get("bench_status"),
                awards_last_30d=row.get("awards_last_30d"),
                last_capacity_update_at=row.get("last_capacity_update_at"),
            )
        return out


class DuckDBAwardKickoffSource(_DuckDBSource):
    source_name = "kickoff"
    relation = QUOTES_TABLE

    async def get(
        self,
        supplier_ids: Sequence[str],
        lookback_days: int,
        on_time_days: int,
        now: datetime,
    ) -> dict[str, KickoffSummary]:
        if not supplier_ids:
            return {}
        cutoff = to_naive_utc(now - timedelta(days=lookback_days))
        rows = await self._fetch(
            f"""
            SELECT id, awarded_supplier_id, awarded_at, kickoff_completed_at
            FROM {QUOTES_TABLE}
            WHERE awarded_supplier_id IN ({_placeholders(supplier_ids)})
              AND awarded_at >= ?
            """,
            [*supplier_ids, cutoff],
        )

        on_time_window = timedelta(days=on_time_days)
        counts: dict[str, list[int]] = {supplier_id: [0, 0] for supplier_id in supplier_ids}
        for row in rows:
            bucket = counts.get(normalize_id(row.get("awarded_supplier_id")))
            awarded_at = parse_timestamp(row.get("awarded_at"))
            if bucket is None or awarded_at is None:
                continue
            bucket[0] += 1
            kickoff_at = parse_timestamp(row.get("kickoff_completed_at"))
            if kickoff_at is not None and kickoff_at - awarded_at <= on_time_window:
                bucket[1] += 1

        return {
            supplier_id: KickoffSummary(awarded_count=awarded, on_time_count=on_time)
            for supplier_id, (awarded, on_time) in counts.items()
        }


class DuckDBParticipationSource(_DuckDBSource):
    source_name = "participation"
    relation = BIDS_TABLE

    async def get(
        self,
        supplier_ids: Sequence[str],
        lookback_days: int,
        per_supplier_cap: int,
        row_limit: int,
        now: datetime,
    ) -> dict[str, set[str]]:
        if not supplier_ids:
            return {}
        cutoff = to_naive_utc(now - timedelta(days=lookback_days))
        rows = await self._fetch(
            f"""
            SELECT supplier_id, quote_id, created_at
            FROM {BIDS_TABLE}
            WHERE supplier_id IN ({_placeholders(supplier_ids)})
              AND created_at >= ?
            ORDER BY created_at DESC
            LIMIT {int(row_limit)}
            """,
            [*supplier_ids, cutoff],
        )

        out: dict[str, set[str]] = {supplier_id: set() for supplier_id in supplier_ids}
        for row in rows:
            quotes = out.get(normalize_id(row.get("supplier_id")))
            quote_id = normalize_id(row.get("quote_id"))
            if quotes is None or not quote_id or len(quotes) >= per_supplier_cap:
                continue
            quotes.add(quote_id)
        return out


class DuckDBThreadActivitySource(_DuckDBSource):
    source_name = "thread_activity"
    relation = MESSAGES_TABLE

    async def get(
        self, quote_ids: Sequence[str], message_limit: int
    ) -> dict[str, ThreadActivity]:
        if not quote_ids:
            return {}
        rows = await self._fetch(
            f"""
            SELECT id, quote_id, created_at, sender_role
            FROM {MESSAGES_TABLE}
            WHERE quote_id IN ({_placeholders(quote_ids)})
            ORDER BY created_at DESC, id DESC
            LIMIT {int(message_limit)}
            """,
            list(quote_ids),
        )
        return build_thread_rollups(rows)


class DuckDBFeedbackSource(_DuckDBSource):
    source_name = "feedback"
    relation = FEEDBACK_TABLE

    async def get(
        self, supplier_ids: Sequence[str], lookback_days: int, now: datetime
    ) -> dict[str, dict[str, int]]:
        if not supplier_ids:
            return {}
        cutoff = to_naive_utc(now - timedelta(days=lookback_days))
        rows = await self._fetch(
            f"""
            SELECT supplier_id, categories, created_at
            FROM {FEEDBACK_TABLE}
            WHERE supplier_id IN ({_placeholders(supplier_ids)})
              AND created_at >= ?
            LIMIT {FEEDBACK_ROW_LIMIT}
            """,
            [*supplier_ids, cutoff],
        )

        out: dict[str, dict[str, int]] = {supplier_id: {} for supplier_id in supplier_ids}
        for row in rows:
            counts = out.get(normalize_id(row.get("supplier_id")))
            categories = row.get("categories")
            if counts is None or not isinstance(categories, list | tuple):
                continue
            # A category counts once per feedback row.
            for category in {c for c in map(normalize_category, categories) if c}:
                counts[category] = counts.get(category, 0) + 1
        return out


class DuckDBSignalStore:
    """All six signal sources over one DuckDB database."""

    def __init__(self, client: DuckDBClient):
        self.client = client
        self.match_health = DuckDBMatchHealthSource(client)
        self.bench_utilization = DuckDBBenchUtilizationSource(client)
        self.award_kickoff = DuckDBAwardKickoffSource(client)
        self.participation = DuckDBParticipationSource(client)
        self.thread_activity = DuckDBThreadActivitySource(client)
        self.feedback = DuckDBFeedbackSource(client)
