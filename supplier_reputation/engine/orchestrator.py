"""
Reputation orchestration for supplier batches and single-supplier dashboards.

The engine:

1. Normalizes the requested supplier ids
2. Checks authorization (admin for batches unless the caller already did,
   supplier access for self-service)
3. Loads the four cheap signals and the responsiveness sample concurrently
4. Joins the per-signal results into one SignalBundle per supplier
5. Scores every bundle with the pure rubric

Each loader degrades independently; a degraded signal is simply absent for
every supplier in the batch and never blocks the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from ..config.schemas import ReputationSettings
from ..exceptions import AuthorizationError
from ..loaders.responsiveness import ResponsivenessSampler
from ..loaders.signal_loaders import (
    load_bench_utilization,
    load_feedback,
    load_kickoff_timeliness,
    load_match_health,
)
from ..models.reputation_models import (
    BenchStatus,
    BenchUtilizationRecord,
    KickoffSummary,
    MatchHealth,
    MatchHealthRecord,
    ReputationScore,
    ResponsivenessSummary,
    SignalBundle,
)
from ..models.signal_result import SignalResult
from ..scoring.rubric import compute_score
from ..sources.base import AuthorizationContext, SignalSources
from ..utils.async_tools import run_sync
from ..utils.logging_config import log_with_context, warn_once
from ..utils.normalization import normalize_id, normalize_supplier_ids


def _utc_now() -> datetime:
    return datetime.now(UTC)


def assemble_bundle(
    match: MatchHealthRecord | None,
    bench: BenchUtilizationRecord | None,
    kickoff: KickoffSummary | None,
    responsiveness: ResponsivenessSummary | None,
    feedback: dict[str, int] | None,
) -> SignalBundle:
    """Join one supplier's per-signal rows into a SignalBundle.

    Any argument may be None (no row, or the whole signal degraded).
    """
    return SignalBundle(
        match_health=match.match_health if match else MatchHealth.UNKNOWN,
        bench_status=bench.bench_status if bench else BenchStatus.UNKNOWN,
        bids_last_90d=match.bids_90d if match else None,
        wins_last_90d=match.wins_90d if match else None,
        win_rate_pct=match.win_rate_pct if match else None,
        kickoff_on_time_ratio=kickoff.ratio if kickoff else None,
        responsiveness=responsiveness,
        feedback_by_category=feedback,
    )


class ReputationEngine:
    """
    Computes reputation scores for suppliers from injected signal sources.

    Example:
        ```python
        store = DuckDBSignalStore(DuckDBClient("data/marketplace.duckdb", read_only=True))
        engine = ReputationEngine(
            sources=SignalSources.from_store(store),
            authorization=StaticAuthorizationContext(is_admin=True),
        )

        scores = await engine.score_for_suppliers(["sup-1", "sup-2"])
        panel = await engine.score_for_supplier("sup-1")
        ```
    """

    def __init__(
        self,
        sources: SignalSources,
        authorization: AuthorizationContext,
        settings: ReputationSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the engine.

        Args:
            sources: The six signal sources
            authorization: Caller's authorization context
            settings: Reputation settings (loaded from get_config() when omitted)
            clock: Returns "now"; injectable for deterministic tests
        """
        if settings is None:
            from ..config.loader import get_config

            settings = get_config().reputation

        self.sources = sources
        self.authorization = authorization
        self.settings = settings
        self.clock = clock or _utc_now
        self.sampler = ResponsivenessSampler(
            sources.participation, sources.thread_activity, settings, self.clock
        )

    async def score_for_suppliers(
        self, supplier_ids: Iterable[Any], already_authorized: bool = False
    ) -> dict[str, ReputationScore]:
        """
        Score a batch of suppliers for the admin views.

        Args:
            supplier_ids: Raw ids; trimmed, de-duplicated, empties dropped
            already_authorized: Skip the admin check when the caller holds an
                authorized administrative context already

        Returns:
            Mapping of normalized supplier id to ReputationScore, in input order

        Raises:
            AuthorizationError: Caller is not an administrator
        """
        ids = normalize_supplier_ids(supplier_ids)
        if not ids:
            return {}

        if not already_authorized:
            self._authorize(self.authorization.require_admin, supplier_count=len(ids))

        return await self._score(ids)

    async def score_for_supplier(self, supplier_id: Any) -> ReputationScore | None:
        """
        Score one supplier for its own dashboard.

        Returns None ("no score available") for an empty id or when the
        supplier has no bids in the last 90 days, so no reputation panel is
        shown. A supplier whose bid count is unknown still gets its computed
        score, which may be `unknown`.

        Raises:
            AuthorizationError: Caller may not view this supplier
        """
        sid = normalize_id(supplier_id)
        if not sid:
            return None

        self._authorize(
            lambda: self.authorization.require_supplier_access(sid), supplier_id=sid
        )

        scores, bundles = await self._score_with_bundles([sid])
        bundle = bundles[sid]
        if bundle.bids_last_90d == 0:
            logger.debug(
                "No bids in the last 90 days; suppressing self-service reputation",
                supplier_id=sid,
            )
            return None
        return scores[sid]

    def score_for_suppliers_sync(
        self, supplier_ids: Iterable[Any], already_authorized: bool = False
    ) -> dict[str, ReputationScore]:
        return run_sync(self.score_for_suppliers(supplier_ids, already_authorized))

    def score_for_supplier_sync(self, supplier_id: Any) -> ReputationScore | None:
        return run_sync(self.score_for_supplier(supplier_id))

    def _authorize(self, check: Callable[[], None], **context: Any) -> None:
        try:
            check()
        except AuthorizationError as exc:
            logger.warning(
                "[supplier reputation] authorization failed; returning no data",
                error=exc.to_dict(),
                **context,
            )
            raise

    async def _score(self, ids: list[str]) -> dict[str, ReputationScore]:
        scores, _ = await self._score_with_bundles(ids)
        return scores

    async def _score_with_bundles(
        self, ids: list[str]
    ) -> tuple[dict[str, ReputationScore], dict[str, SignalBundle]]:
        with log_with_context(stage="reputation") as log:
            signals = await self._load_signals(ids)
            match, bench, kickoff, feedback, responsiveness = signals

            if match.degraded or bench.degraded:
                warn_once(
                    "missing_core_views",
                    "[supplier reputation] missing views; computing partial reputation",
                    match_view_missing=match.degraded,
                    bench_view_missing=bench.degraded,
                )

            scores: dict[str, ReputationScore] = {}
            bundles: dict[str, SignalBundle] = {}
            for supplier_id in ids:
                bundle = assemble_bundle(
                    match.get(supplier_id),
                    bench.get(supplier_id),
                    kickoff.get(supplier_id),
                    responsiveness.get(supplier_id),
                    feedback.get(supplier_id),
                )
                bundles[supplier_id] = bundle
                scores[supplier_id] = compute_score(bundle, supplier_id)

            log.debug(
                "Computed supplier reputation",
                supplier_count=len(ids),
                degraded=[r.source for r in signals if r.degraded],
            )
        return scores, bundles

    async def _load_signals(self, ids: list[str]) -> tuple[SignalResult, ...]:
        now = self.clock()
        return tuple(
            await asyncio.gather(
                load_match_health(self.sources.match_health, ids, self.settings),
                load_bench_utilization(self.sources.bench_utilization, ids, self.settings),
                load_kickoff_timeliness(self.sources.award_kickoff, ids, self.settings, now),
                load_feedback(self.sources.feedback, ids, self.settings, now),
                self.sampler.load(ids),
            )
        )
