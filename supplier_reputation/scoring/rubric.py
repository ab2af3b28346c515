"""
Reputation rubric: fixed, table-driven mapping from signals to a 0-100 score.

Each signal contributes an independent, bounded delta on top of a neutral base
of 50:
- Win rate over the last 90 days
- Participation (RFQs bid on in the last 90 days)
- Kickoff timeliness on awarded jobs
- Bench utilization / match health
- Responsiveness on threads awaiting a supplier reply
- Repeated negative RFQ feedback

A signal without enough data contributes `None` rather than 0. When every
signal is `None` the score is `None` and the label `unknown`, so a supplier
with no observable history is never reported as a neutral 50.

Everything here is pure: no I/O, no clock, no shared state.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from ..models.reputation_models import (
    BenchStatus,
    MatchHealth,
    ReputationLabel,
    ReputationScore,
    ResponsivenessSummary,
    SignalBundle,
    SupplierId,
)
from ..utils.normalization import to_count, to_count_or_none, to_number_or_none

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

# (inclusive lower bound, delta), checked top to bottom; first match wins.
WIN_RATE_TABLE: tuple[tuple[float, int], ...] = ((50.0, 25), (20.0, 15), (5.0, 5), (1.0, 2))
PARTICIPATION_TABLE: tuple[tuple[int, int], ...] = ((10, 10), (5, 6), (1, 2))
PARTICIPATION_NONE_DELTA = -5
KICKOFF_TABLE: tuple[tuple[float, int], ...] = ((0.8, 10), (0.5, 5))
KICKOFF_LATE_DELTA = -10
RESPONSIVENESS_TABLE: tuple[tuple[float, int], ...] = ((0.8, 10), (0.5, 5))
RESPONSIVENESS_SLOW_DELTA = -10

GOOD_MATCH_BENCH_BONUS: dict[BenchStatus, int] = {
    BenchStatus.UNDERUSED: 8,
    BenchStatus.BALANCED: 5,
}
GOOD_MATCH_DEFAULT_BONUS = 2
MATCH_HEALTH_PENALTY: dict[MatchHealth, int] = {
    MatchHealth.CAUTION: -3,
    MatchHealth.POOR: -8,
}
OVERUSED_PENALTY = -5

# category -> (minimum occurrences, delta). Each rule applies independently.
FEEDBACK_RULES: dict[str, tuple[int, int]] = {
    "outside_capability": (3, -5),
    "scope_unclear": (3, -3),
    # Timeline pressure is rarely the supplier's fault.
    "timeline_unrealistic": (6, -1),
}

LABEL_THRESHOLDS: tuple[tuple[int, ReputationLabel], ...] = (
    (85, ReputationLabel.EXCELLENT),
    (70, ReputationLabel.GOOD),
    (50, ReputationLabel.FAIR),
)


def _first_match(value: float, table: tuple[tuple[float, int], ...], default: int) -> int:
    for lower_bound, delta in table:
        if value >= lower_bound:
            return delta
    return default


def win_rate_delta(win_rate_pct: float | None, bids_90d: int | None) -> int | None:
    """Delta for the 90-day win rate; needs both a win rate and a bid count."""
    pct = to_number_or_none(win_rate_pct)
    bids = to_count_or_none(bids_90d)
    if pct is None or bids is None:
        return None
    if pct <= 0:
        return 0
    return _first_match(pct, WIN_RATE_TABLE, 0)


def participation_delta(bids_90d: int | None) -> int | None:
    bids = to_count_or_none(bids_90d)
    if bids is None:
        return None
    return _first_match(bids, PARTICIPATION_TABLE, PARTICIPATION_NONE_DELTA)


def kickoff_delta(on_time_ratio: float | None) -> int | None:
    ratio = to_number_or_none(on_time_ratio)
    if ratio is None:
        return None
    return _first_match(ratio, KICKOFF_TABLE, KICKOFF_LATE_DELTA)


def bench_match_delta(match_health: MatchHealth, bench_status: BenchStatus) -> int | None:
    """Combined match-health / bench-utilization delta.

    Both unknown means no signal. A good match earns a bonus that grows with
    spare capacity; caution and poor matches are penalized; an overused bench
    is penalized on top of whatever the match health produced.
    """
    if match_health == MatchHealth.UNKNOWN and bench_status == BenchStatus.UNKNOWN:
        return None

    delta = 0
    if match_health == MatchHealth.GOOD:
        delta += GOOD_MATCH_BENCH_BONUS.get(bench_status, GOOD_MATCH_DEFAULT_BONUS)
    else:
        delta += MATCH_HEALTH_PENALTY.get(match_health, 0)

    if bench_status == BenchStatus.OVERUSED:
        delta += OVERUSED_PENALTY
    return delta


def responsiveness_delta(summary: ResponsivenessSummary | None) -> int | None:
    """Delta from the share of reply-pending threads still inside the reply window."""
    if summary is None:
        return None
    total = to_count(summary.needs_reply_count)
    within = to_count(summary.needs_reply_within_48h_count)
    if total <= 0:
        return None
    return _first_match(within / total, RESPONSIVENESS_TABLE, RESPONSIVENESS_SLOW_DELTA)


def feedback_penalty(by_category: Mapping[str, int] | None) -> int | None:
    if not by_category:
        return None

    penalty = 0
    triggered = False
    for category, (min_count, delta) in FEEDBACK_RULES.items():
        if to_count(by_category.get(category)) >= min_count:
            penalty += delta
            triggered = True

    return penalty if triggered else None


def clamp_score(value: float) -> int:
    """Round half away from zero, then clamp to [0, 100]. Non-finite -> 0."""
    if not math.isfinite(value):
        return MIN_SCORE
    rounded = math.floor(value + 0.5) if value >= 0 else -math.floor(-value + 0.5)
    return max(MIN_SCORE, min(MAX_SCORE, rounded))


def score_to_label(score: int | None) -> ReputationLabel:
    if score is None:
        return ReputationLabel.UNKNOWN
    for lower_bound, label in LABEL_THRESHOLDS:
        if score >= lower_bound:
            return label
    return ReputationLabel.LIMITED


def compute_score(bundle: SignalBundle, supplier_id: SupplierId = "") -> ReputationScore:
    """Map one supplier's signal bundle to its reputation score."""
    components = {
        "win_rate_score": win_rate_delta(bundle.win_rate_pct, bundle.bids_last_90d),
        "participation_score": participation_delta(bundle.bids_last_90d),
        "kickoff_score": kickoff_delta(bundle.kickoff_on_time_ratio),
        "responsiveness_score": responsiveness_delta(bundle.responsiveness),
        "bench_match_score": bench_match_delta(bundle.match_health, bundle.bench_status),
        "feedback_penalty": feedback_penalty(bundle.feedback_by_category),
    }

    present = [delta for delta in components.values() if delta is not None]
    if not present:
        return ReputationScore.unknown(supplier_id)

    score = clamp_score(BASE_SCORE + sum(present))
    return ReputationScore(
        supplier_id=supplier_id,
        score=score,
        label=score_to_label(score),
        **components,
    )
