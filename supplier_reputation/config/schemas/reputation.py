"""Configuration schemas for reputation signal loading."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class FeedbackConfig(BaseModel):
    """RFQ feedback signal settings."""

    enabled: bool = Field(
        default=True, description="Feature flag for supplier RFQ feedback collection"
    )
    lookback_days: int = Field(default=365, ge=1)


class KickoffConfig(BaseModel):
    """Award kickoff timeliness settings."""

    lookback_days: int = Field(default=365, ge=1, description="Award lookback window")
    on_time_days: int = Field(
        default=14, ge=0, description="Kickoff completed within this many days counts as on time"
    )


class ResponsivenessConfig(BaseModel):
    """Bounds for the two-stage responsiveness sampler."""

    enabled: bool = True
    lookback_days: int = Field(default=90, ge=1)
    max_suppliers: int = Field(
        default=50, ge=1, description="Batches larger than this skip the signal entirely"
    )
    max_quotes_per_supplier: int = Field(default=25, ge=1)
    reply_window_hours: float = Field(default=48.0, gt=0)
    min_participation_rows: int = Field(default=500, ge=1)
    max_participation_rows: int = Field(default=20000, ge=1)
    min_message_rows: int = Field(default=300, ge=1)
    max_message_rows: int = Field(default=15000, ge=1)
    messages_per_quote: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _check_row_bounds(self) -> ResponsivenessConfig:
        if self.min_participation_rows > self.max_participation_rows:
            raise ValueError("min_participation_rows must be <= max_participation_rows")
        if self.min_message_rows > self.max_message_rows:
            raise ValueError("min_message_rows must be <= max_message_rows")
        return self

    def participation_row_limit(self, supplier_count: int) -> int:
        """Stage 1 read bound for a batch of `supplier_count` suppliers."""
        wanted = supplier_count * self.max_quotes_per_supplier * 2
        return min(self.max_participation_rows, max(self.min_participation_rows, wanted))

    def message_row_limit(self, quote_count: int) -> int:
        """Stage 2 read bound for `quote_count` sampled quotes."""
        wanted = quote_count * self.messages_per_quote
        return min(self.max_message_rows, max(self.min_message_rows, wanted))


class ReputationSettings(BaseModel):
    """Signal loading settings for the reputation engine."""

    loader_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Per-loader deadline; a timeout degrades the signal"
    )
    kickoff: KickoffConfig = Field(default_factory=KickoffConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    responsiveness: ResponsivenessConfig = Field(default_factory=ResponsivenessConfig)


__all__ = [
    "FeedbackConfig",
    "KickoffConfig",
    "ReputationSettings",
    "ResponsivenessConfig",
]
