"""
Responsiveness sampler: the one expensive, two-stage signal.

Stage 1 reads recent (supplier, quote) participation, capped per supplier and
in total rows. Stage 2 reads a bounded window of thread messages for those
quotes. Messages are reduced in memory with a single pass into one rollup per
quote, and the rollups are then aggregated per supplier:

- needs_reply_count: sampled quotes whose latest customer message has no newer
  supplier message;
- needs_reply_within_48h_count: the subset whose outstanding customer message
  is younger than the reply window.

Batches above the supplier ceiling skip the signal entirely (degraded) instead
of approximating it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..config.schemas import ReputationSettings
from ..models.reputation_models import ResponsivenessSummary, SenderRole, ThreadActivity
from ..models.signal_result import Degraded, DegradedReason, Ok, SignalResult
from ..sources.base import ParticipationSource, ThreadActivitySource
from ..utils.logging_config import warn_once
from ..utils.normalization import normalize_id, parse_timestamp
from .signal_loaders import RESPONSIVENESS, run_guarded


@dataclass
class _ThreadRollup:
    last_message_at: datetime | None = None
    last_role: SenderRole | None = None
    last_customer_message_at: datetime | None = None
    last_supplier_message_at: datetime | None = None

    def add(self, created_at: datetime, role: SenderRole | None) -> None:
        if self.last_message_at is None or created_at > self.last_message_at:
            self.last_message_at = created_at
            self.last_role = role
        if role == SenderRole.CUSTOMER:
            if self.last_customer_message_at is None or created_at > self.last_customer_message_at:
                self.last_customer_message_at = created_at
        elif role == SenderRole.SUPPLIER:
            if self.last_supplier_message_at is None or created_at > self.last_supplier_message_at:
                self.last_supplier_message_at = created_at

    def freeze(self) -> ThreadActivity:
        return ThreadActivity(
            last_message_at=self.last_message_at,
            last_role=self.last_role,
            last_customer_message_at=self.last_customer_message_at,
            last_supplier_message_at=self.last_supplier_message_at,
        )


def _field(message: Any, name: str) -> Any:
    if isinstance(message, Mapping):
        return message.get(name)
    return getattr(message, name, None)


def build_thread_rollups(messages: Iterable[Any]) -> dict[str, ThreadActivity]:
    """Reduce a flat list of thread messages to the latest activity per quote.

    Each message is a mapping (or object) with `quote_id`, `created_at` and
    `sender_role`. Messages without a quote id or a parseable timestamp are
    skipped. Input order does not matter.
    """
    rollups: dict[str, _ThreadRollup] = {}
    for message in messages:
        quote_id = normalize_id(_field(message, "quote_id"))
        created_at = parse_timestamp(_field(message, "created_at"))
        if not quote_id or created_at is None:
            continue
        role = SenderRole.parse(_field(message, "sender_role"))
        rollups.setdefault(quote_id, _ThreadRollup()).add(created_at, role)
    return {quote_id: rollup.freeze() for quote_id, rollup in rollups.items()}


def needs_reply_from_supplier(activity: ThreadActivity) -> bool:
    """True when the latest customer message is newer than any supplier message."""
    if activity.last_customer_message_at is None:
        return False
    if activity.last_supplier_message_at is None:
        return True
    return activity.last_customer_message_at > activity.last_supplier_message_at


def cap_quote_ids(
    quotes_by_supplier: Mapping[str, Iterable[str]],
    supplier_ids: Sequence[str],
    per_supplier_cap: int,
) -> dict[str, list[str]]:
    """Keep at most `per_supplier_cap` distinct quote ids for each requested supplier."""
    capped: dict[str, list[str]] = {supplier_id: [] for supplier_id in supplier_ids}
    for raw_supplier_id, quote_ids in quotes_by_supplier.items():
        bucket = capped.get(normalize_id(raw_supplier_id))
        if bucket is None:
            continue
        for raw_quote_id in quote_ids:
            if len(bucket) >= per_supplier_cap:
                break
            quote_id = normalize_id(raw_quote_id)
            if quote_id and quote_id not in bucket:
                bucket.append(quote_id)
    return capped


def aggregate_responsiveness(
    quotes_by_supplier: Mapping[str, Sequence[str]],
    activity_by_quote: Mapping[str, ThreadActivity],
    now: datetime,
    reply_window: timedelta,
) -> dict[str, ResponsivenessSummary]:
    """Count reply-pending quotes per supplier, and those still inside the window."""
    summaries: dict[str, ResponsivenessSummary] = {}
    for supplier_id, quote_ids in quotes_by_supplier.items():
        needs_reply = 0
        within_window = 0
        for quote_id in quote_ids:
            activity = activity_by_quote.get(quote_id)
            if isinstance(activity, Mapping):
                activity = ThreadActivity.model_validate(activity)
            if activity is None or not needs_reply_from_supplier(activity):
                continue
            needs_reply += 1
            waiting_since = activity.last_customer_message_at
            if waiting_since is not None and now - waiting_since < reply_window:
                within_window += 1
        summaries[supplier_id] = ResponsivenessSummary(
            needs_reply_count=needs_reply,
            needs_reply_within_48h_count=within_window,
        )
    return summaries


class ResponsivenessSampler:
    """Bounded two-stage loader for the responsiveness signal."""

    def __init__(
        self,
        participation: ParticipationSource,
        thread_activity: ThreadActivitySource,
        settings: ReputationSettings,
        clock: Callable[[], datetime],
    ):
        self.participation = participation
        self.thread_activity = thread_activity
        self.settings = settings
        self.config = settings.responsiveness
        self.clock = clock

    async def load(self, supplier_ids: Sequence[str]) -> SignalResult[ResponsivenessSummary]:
        if not supplier_ids:
            return Ok({})
        if not self.config.enabled:
            return Degraded(RESPONSIVENESS, DegradedReason.DISABLED)
        if len(supplier_ids) > self.config.max_suppliers:
            warn_once(
                "responsiveness_batch_too_large",
                "[supplier reputation] skipping responsiveness for large batch",
                supplier_count=len(supplier_ids),
                max_suppliers=self.config.max_suppliers,
            )
            return Degraded(RESPONSIVENESS, DegradedReason.BATCH_TOO_LARGE)

        now = parse_timestamp(self.clock())
        return await run_guarded(
            RESPONSIVENESS,
            supplier_ids,
            lambda: self._sample(supplier_ids, now),
            self.settings.loader_timeout_seconds,
        )

    async def _sample(
        self, supplier_ids: Sequence[str], now: datetime
    ) -> dict[str, ResponsivenessSummary]:
        per_supplier_cap = self.config.max_quotes_per_supplier
        participation = await self.participation.get(
            supplier_ids,
            lookback_days=self.config.lookback_days,
            per_supplier_cap=per_supplier_cap,
            row_limit=self.config.participation_row_limit(len(supplier_ids)),
            now=now,
        )
        quotes_by_supplier = cap_quote_ids(participation or {}, supplier_ids, per_supplier_cap)

        quote_ids = list(
            dict.fromkeys(q for quotes in quotes_by_supplier.values() for q in quotes)
        )
        if not quote_ids:
            return {supplier_id: ResponsivenessSummary() for supplier_id in supplier_ids}

        activity = await self.thread_activity.get(
            quote_ids, message_limit=self.config.message_row_limit(len(quote_ids))
        )
        return aggregate_responsiveness(
            quotes_by_supplier,
            activity or {},
            now,
            timedelta(hours=self.config.reply_window_hours),
        )
