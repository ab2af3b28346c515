"""Signal source interfaces.

The DuckDB-backed implementation lives in `supplier_reputation.sources.duckdb_store`
and is imported explicitly by callers that want it.
"""

from .base import (
    AuthorizationContext,
    AwardKickoffSource,
    BenchUtilizationSource,
    FeedbackSource,
    MatchHealthSource,
    ParticipationSource,
    SignalSources,
    StaticAuthorizationContext,
    ThreadActivitySource,
)

__all__ = [
    "AuthorizationContext",
    "AwardKickoffSource",
    "BenchUtilizationSource",
    "FeedbackSource",
    "MatchHealthSource",
    "ParticipationSource",
    "SignalSources",
    "StaticAuthorizationContext",
    "ThreadActivitySource",
]
