"""Read-only interfaces the engine consumes from upstream collaborators.

Every source is async. A source raises `SourceUnavailableError` when its backing
aggregate is structurally absent (missing view, table or column); any other
exception is treated by the loaders as a transient fault.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from ..exceptions import AuthorizationError
from ..models.reputation_models import (
    BenchUtilizationRecord,
    KickoffSummary,
    MatchHealthRecord,
    ThreadActivity,
)


@runtime_checkable
class MatchHealthSource(Protocol):
    async def get(self, supplier_ids: Sequence[str]) -> dict[str, MatchHealthRecord]: ...


@runtime_checkable
class BenchUtilizationSource(Protocol):
    async def get(self, supplier_ids: Sequence[str]) -> dict[str, BenchUtilizationRecord]: ...


@runtime_checkable
class AwardKickoffSource(Protocol):
    async def get(
        self,
        supplier_ids: Sequence[str],
        lookback_days: int,
        on_time_days: int,
        now: datetime,
    ) -> dict[str, KickoffSummary]: ...


@runtime_checkable
class ParticipationSource(Protocol):
    """Stage 1 of responsiveness: recent (supplier, quote) participation."""

    async def get(
        self,
        supplier_ids: Sequence[str],
        lookback_days: int,
        per_supplier_cap: int,
        row_limit: int,
        now: datetime,
    ) -> dict[str, set[str]]: ...


@runtime_checkable
class ThreadActivitySource(Protocol):
    """Stage 2 of responsiveness: latest activity per quote thread."""

    async def get(
        self, quote_ids: Sequence[str], message_limit: int
    ) -> dict[str, ThreadActivity]: ...


@runtime_checkable
class FeedbackSource(Protocol):
    async def get(
        self, supplier_ids: Sequence[str], lookback_days: int, now: datetime
    ) -> dict[str, dict[str, int]]: ...


@runtime_checkable
class AuthorizationContext(Protocol):
    def require_admin(self) -> None:
        """Raise AuthorizationError unless the caller is an administrator."""
        ...

    def require_supplier_access(self, supplier_id: str) -> None:
        """Raise AuthorizationError unless the caller may view this supplier's data."""
        ...


@dataclass(frozen=True)
class SignalSources:
    """The six signal sources one engine reads from."""

    match_health: MatchHealthSource
    bench_utilization: BenchUtilizationSource
    award_kickoff: AwardKickoffSource
    participation: ParticipationSource
    thread_activity: ThreadActivitySource
    feedback: FeedbackSource

    @classmethod
    def from_store(cls, store) -> SignalSources:
        """Use one object implementing every source (e.g. DuckDBSignalStore)."""
        return cls(
            match_health=store.match_health,
            bench_utilization=store.bench_utilization,
            award_kickoff=store.award_kickoff,
            participation=store.participation,
            thread_activity=store.thread_activity,
            feedback=store.feedback,
        )


class StaticAuthorizationContext:
    """Authorization decided up front by the host's session layer.

    Administrators may read any supplier; a supplier session may read only the
    supplier ids it owns.
    """

    def __init__(self, is_admin: bool = False, supplier_ids: Iterable[str] = ()):
        self.is_admin = is_admin
        self.supplier_ids = frozenset(s.strip() for s in supplier_ids if isinstance(s, str))

    def require_admin(self) -> None:
        if not self.is_admin:
            raise AuthorizationError(
                "Administrator access required", operation="require_admin"
            )

    def require_supplier_access(self, supplier_id: str) -> None:
        if self.is_admin or supplier_id in self.supplier_ids:
            return
        raise AuthorizationError(
            "Not allowed to view this supplier's reputation",
            operation="require_supplier_access",
            details={"supplier_id": supplier_id},
        )
