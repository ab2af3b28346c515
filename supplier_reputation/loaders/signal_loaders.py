"""Signal loaders: one async function per behavioral signal.

Loaders never raise to the orchestrator. Each returns a tagged result:

- `Ok(data)` with whatever rows the source produced (possibly empty);
- `Degraded(source, reason)` when the source is structurally unavailable, the
  per-call deadline expired, or the signal is switched off.

Structural unavailability is logged once per process per source; transient
faults are logged with full context every time and collapse to an empty `Ok`.
There are no retries here: callers re-run the whole orchestration instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger

from ..config.schemas import ReputationSettings
from ..exceptions import SourceUnavailableError
from ..models.reputation_models import (
    BenchUtilizationRecord,
    KickoffSummary,
    MatchHealthRecord,
)
from ..models.signal_result import Degraded, DegradedReason, Ok, SignalResult
from ..sources.base import (
    AwardKickoffSource,
    BenchUtilizationSource,
    FeedbackSource,
    MatchHealthSource,
)
from ..utils.logging_config import warn_once
from ..utils.normalization import normalize_category, normalize_id, to_count

T = TypeVar("T")

MATCH_HEALTH = "match_health"
BENCH_UTILIZATION = "bench_utilization"
KICKOFF = "kickoff"
FEEDBACK = "feedback"
RESPONSIVENESS = "responsiveness"


async def run_guarded(
    source_name: str,
    supplier_ids: Sequence[str],
    fetch: Callable[[], Awaitable[Mapping[str, T]]],
    timeout_seconds: float,
    transform: Callable[[Any], T | None] | None = None,
) -> SignalResult[T]:
    """Run one source fetch under the degrade-don't-raise policy.

    Args:
        source_name: Signal name used in logs and in `Degraded`
        supplier_ids: Normalized ids of the batch (only these are kept)
        fetch: Zero-argument coroutine factory performing the read
        timeout_seconds: Per-call deadline
        transform: Optional per-row coercion; rows mapping to None are dropped
    """
    if not supplier_ids:
        return Ok({})

    try:
        raw = await asyncio.wait_for(fetch(), timeout=timeout_seconds)
    except SourceUnavailableError as exc:
        warn_once(
            f"source_degraded:{source_name}",
            f"[supplier reputation] {source_name} source unavailable; signal omitted",
            source=source_name,
            supplier_count=len(supplier_ids),
            error=exc.to_dict(),
        )
        return Degraded(source_name, DegradedReason.UNAVAILABLE)
    except TimeoutError:
        logger.warning(
            f"[supplier reputation] {source_name} load timed out after {timeout_seconds}s",
            source=source_name,
            supplier_count=len(supplier_ids),
        )
        return Degraded(source_name, DegradedReason.TIMEOUT)
    except Exception:
        logger.exception(
            f"[supplier reputation] {source_name} load failed",
            source=source_name,
            supplier_count=len(supplier_ids),
        )
        return Ok({})

    if raw is None:
        return Ok({})
    if not isinstance(raw, Mapping):
        logger.error(
            f"[supplier reputation] {source_name} source returned {type(raw).__name__}, "
            "expected a mapping",
            source=source_name,
        )
        return Ok({})

    wanted = set(supplier_ids)
    data: dict[str, T] = {}
    for raw_id, row in raw.items():
        supplier_id = normalize_id(raw_id)
        if supplier_id not in wanted:
            continue
        try:
            value = transform(row) if transform else row
        except (ValueError, TypeError) as exc:
            logger.warning(
                f"[supplier reputation] dropping malformed {source_name} row",
                source=source_name,
                supplier_id=supplier_id,
                error=str(exc),
            )
            continue
        if value is not None:
            data[supplier_id] = value
    return Ok(data)


def _as_model(model: type) -> Callable[[Any], Any]:
    def convert(row: Any) -> Any:
        if isinstance(row, model):
            return row
        if isinstance(row, Mapping):
            return model.model_validate(row)
        return None

    return convert


def _normalize_feedback_counts(row: Any) -> dict[str, int] | None:
    if not isinstance(row, Mapping):
        return None
    counts: dict[str, int] = {}
    for category, count in row.items():
        key = normalize_category(category)
        if key:
            counts[key] = counts.get(key, 0) + to_count(count)
    return counts


async def load_match_health(
    source: MatchHealthSource,
    supplier_ids: Sequence[str],
    settings: ReputationSettings,
) -> SignalResult[MatchHealthRecord]:
    return await run_guarded(
        MATCH_HEALTH,
        supplier_ids,
        lambda: source.get(supplier_ids),
        settings.loader_timeout_seconds,
        _as_model(MatchHealthRecord),
    )


async def load_bench_utilization(
    source: BenchUtilizationSource,
    supplier_ids: Sequence[str],
    settings: ReputationSettings,
) -> SignalResult[BenchUtilizationRecord]:
    return await run_guarded(
        BENCH_UTILIZATION,
        supplier_ids,
        lambda: source.get(supplier_ids),
        settings.loader_timeout_seconds,
        _as_model(BenchUtilizationRecord),
    )


async def load_kickoff_timeliness(
    source: AwardKickoffSource,
    supplier_ids: Sequence[str],
    settings: ReputationSettings,
    now: datetime,
) -> SignalResult[KickoffSummary]:
    """Share of awards (365-day lookback) whose kickoff completed within 14 days."""
    return await run_guarded(
        KICKOFF,
        supplier_ids,
        lambda: source.get(
            supplier_ids,
            lookback_days=settings.kickoff.lookback_days,
            on_time_days=settings.kickoff.on_time_days,
            now=now,
        ),
        settings.loader_timeout_seconds,
        _as_model(KickoffSummary),
    )


async def load_feedback(
    source: FeedbackSource,
    supplier_ids: Sequence[str],
    settings: ReputationSettings,
    now: datetime,
) -> SignalResult[dict[str, int]]:
    """RFQ feedback category counts; degraded without a read when the feature is off."""
    if not supplier_ids:
        return Ok({})
    if not settings.feedback.enabled:
        warn_once(
            f"source_degraded:{FEEDBACK}",
            "[supplier reputation] feedback collection disabled; signal omitted",
            source=FEEDBACK,
            reason=DegradedReason.DISABLED,
        )
        return Degraded(FEEDBACK, DegradedReason.DISABLED)

    return await run_guarded(
        FEEDBACK,
        supplier_ids,
        lambda: source.get(supplier_ids, lookback_days=settings.feedback.lookback_days, now=now),
        settings.loader_timeout_seconds,
        _normalize_feedback_counts,
    )
