from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.normalization import (
    normalize_label,
    parse_timestamp,
    to_count_or_none,
    to_number_or_none,
)

SupplierId = str


class MatchHealth(str, Enum):
    GOOD = "good"
    CAUTION = "caution"
    POOR = "poor"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> MatchHealth:
        try:
            return cls(normalize_label(value))
        except ValueError:
            return cls.UNKNOWN


class BenchStatus(str, Enum):
    UNDERUSED = "underused"
    BALANCED = "balanced"
    OVERUSED = "overused"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> BenchStatus:
        try:
            return cls(normalize_label(value))
        except ValueError:
            return cls.UNKNOWN


class ReputationLabel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    LIMITED = "limited"
    UNKNOWN = "unknown"


class SenderRole(str, Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> SenderRole | None:
        try:
            return cls(normalize_label(value))
        except ValueError:
            return None


class MatchHealthRecord(BaseModel):
    """One row of the supplier match-health aggregate (90-day window)."""

    bids_90d: int | None = Field(None, ge=0, description="Distinct RFQs bid on in 90 days.")
    wins_90d: int | None = Field(None, ge=0, description="Distinct RFQs won in 90 days.")
    win_rate_pct: float | None = Field(
        None, description="Source-provided win rate percentage, when the view computes one."
    )
    match_health: MatchHealth = MatchHealth.UNKNOWN

    @field_validator("bids_90d", "wins_90d", mode="before")
    @classmethod
    def _as_count(cls, value: Any) -> int | None:
        return to_count_or_none(value)

    @field_validator("win_rate_pct", mode="before")
    @classmethod
    def _as_number(cls, value: Any) -> float | None:
        return to_number_or_none(value)

    @field_validator("match_health", mode="before")
    @classmethod
    def _parse_health(cls, value: Any) -> MatchHealth:
        return value if isinstance(value, MatchHealth) else MatchHealth.parse(value)


class BenchUtilizationRecord(BaseModel):
    """One row of the supplier bench-utilization aggregate."""

    bench_status: BenchStatus = BenchStatus.UNKNOWN
    awards_last_30d: int | None = Field(None, ge=0)
    last_capacity_update_at: datetime | None = None

    @field_validator("bench_status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> BenchStatus:
        return value if isinstance(value, BenchStatus) else BenchStatus.parse(value)

    @field_validator("awards_last_30d", mode="before")
    @classmethod
    def _as_count(cls, value: Any) -> int | None:
        return to_count_or_none(value)

    @field_validator("last_capacity_update_at", mode="before")
    @classmethod
    def _as_utc(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)


class KickoffSummary(BaseModel):
    """Kickoff timeliness over awarded jobs in the lookback window.

    Sources normally report counts; a source that only knows the ratio may
    pass it as `ratio`, which is used when no awarded jobs are counted.
    """

    model_config = ConfigDict(populate_by_name=True)

    awarded_count: int = Field(0, ge=0)
    on_time_count: int = Field(0, ge=0)
    reported_ratio: float | None = Field(None, ge=0, le=1, alias="ratio")

    @field_validator("reported_ratio", mode="before")
    @classmethod
    def _as_number(cls, value: Any) -> float | None:
        return to_number_or_none(value)

    @property
    def ratio(self) -> float | None:
        if self.awarded_count <= 0:
            return self.reported_ratio
        return min(self.on_time_count, self.awarded_count) / self.awarded_count


class ThreadActivity(BaseModel):
    """Latest message activity on one quote thread."""

    last_message_at: datetime | None = None
    last_role: SenderRole | None = None
    last_customer_message_at: datetime | None = None
    last_supplier_message_at: datetime | None = None

    @field_validator(
        "last_message_at", "last_customer_message_at", "last_supplier_message_at", mode="before"
    )
    @classmethod
    def _as_utc(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("last_role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> SenderRole | None:
        return value if isinstance(value, SenderRole) else SenderRole.parse(value)


class ResponsivenessSummary(BaseModel):
    """Threads awaiting a supplier reply, and how many of those are still fresh."""

    needs_reply_count: int = Field(0, ge=0)
    needs_reply_within_48h_count: int = Field(0, ge=0)


class SignalBundle(BaseModel):
    """Per-supplier snapshot of every signal, rebuilt on each call."""

    model_config = ConfigDict(frozen=True)

    match_health: MatchHealth = MatchHealth.UNKNOWN
    bench_status: BenchStatus = BenchStatus.UNKNOWN
    bids_last_90d: int | None = Field(None, ge=0)
    wins_last_90d: int | None = Field(None, ge=0)
    win_rate_pct: float | None = None
    kickoff_on_time_ratio: float | None = Field(None, ge=0.0, le=1.0)
    responsiveness: ResponsivenessSummary | None = None
    feedback_by_category: dict[str, int] | None = None

    @field_validator("feedback_by_category")
    @classmethod
    def _lowercase_categories(cls, value: dict[str, int] | None) -> dict[str, int] | None:
        if value is None:
            return None
        merged: dict[str, int] = {}
        for category, count in value.items():
            key = normalize_label(category)
            if key:
                merged[key] = merged.get(key, 0) + max(0, int(count))
        return merged

    @model_validator(mode="after")
    def _derive_win_rate(self) -> SignalBundle:
        if (
            self.win_rate_pct is None
            and self.bids_last_90d is not None
            and self.bids_last_90d > 0
            and self.wins_last_90d is not None
        ):
            object.__setattr__(
                self, "win_rate_pct", self.wins_last_90d / self.bids_last_90d * 100.0
            )
        return self


COMPONENT_FIELDS: tuple[str, ...] = (
    "win_rate_score",
    "participation_score",
    "kickoff_score",
    "responsiveness_score",
    "bench_match_score",
    "feedback_penalty",
)


class ReputationScore(BaseModel):
    """Composite 0-100 reliability score for one supplier, with its components."""

    model_config = ConfigDict(frozen=True)

    supplier_id: SupplierId
    score: int | None = Field(None, ge=0, le=100)
    label: ReputationLabel = ReputationLabel.UNKNOWN

    win_rate_score: int | None = None
    participation_score: int | None = None
    kickoff_score: int | None = None
    responsiveness_score: int | None = None
    bench_match_score: int | None = None
    feedback_penalty: int | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> ReputationScore:
        has_component = any(v is not None for v in self.component_deltas().values())
        if (self.score is None) == has_component:
            raise ValueError("score must be null exactly when every component is null")
        if (self.label == ReputationLabel.UNKNOWN) != (self.score is None):
            raise ValueError("label must be 'unknown' exactly when score is null")
        return self

    def component_deltas(self) -> dict[str, int | None]:
        """Signed per-signal deltas in rubric order (None = no contribution)."""
        return {name: getattr(self, name) for name in COMPONENT_FIELDS}

    @classmethod
    def unknown(cls, supplier_id: SupplierId) -> ReputationScore:
        return cls(supplier_id=supplier_id)
