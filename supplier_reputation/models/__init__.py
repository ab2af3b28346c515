"""Data models for supplier reputation signals and scores."""

from .reputation_models import (
    COMPONENT_FIELDS,
    BenchStatus,
    BenchUtilizationRecord,
    KickoffSummary,
    MatchHealth,
    MatchHealthRecord,
    ReputationLabel,
    ReputationScore,
    ResponsivenessSummary,
    SenderRole,
    SignalBundle,
    SupplierId,
    ThreadActivity,
)
from .signal_result import Degraded, DegradedReason, Ok, SignalResult


__all__ = [
    "COMPONENT_FIELDS",
    "BenchStatus",
    "BenchUtilizationRecord",
    "Degraded",
    "DegradedReason",
    "KickoffSummary",
    "MatchHealth",
    "MatchHealthRecord",
    "Ok",
    "ReputationLabel",
    "ReputationScore",
    "ResponsivenessSummary",
    "SenderRole",
    "SignalBundle",
    "SignalResult",
    "SupplierId",
    "ThreadActivity",
]
