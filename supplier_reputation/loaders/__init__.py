"""Signal loaders and the bounded responsiveness sampler."""

from .responsiveness import ResponsivenessSampler, build_thread_rollups, needs_reply_from_supplier
from .signal_loaders import (
    load_bench_utilization,
    load_feedback,
    load_kickoff_timeliness,
    load_match_health,
    run_guarded,
)

__all__ = [
    "ResponsivenessSampler",
    "build_thread_rollups",
    "load_bench_utilization",
    "load_feedback",
    "load_kickoff_timeliness",
    "load_match_health",
    "needs_reply_from_supplier",
    "run_guarded",
]
