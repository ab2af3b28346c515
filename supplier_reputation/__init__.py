"""
Supplier reputation scoring engine.

Computes a 0-100 reliability score and a coarse label for marketplace suppliers
from six behavioral signals (win rate, participation, kickoff timeliness,
bench/match health, responsiveness and RFQ feedback), degrading gracefully
when any signal source is missing.
"""

from .engine import ReputationEngine, assemble_bundle
from .exceptions import AuthorizationError, ReputationError, SourceUnavailableError
from .models import ReputationLabel, ReputationScore, SignalBundle
from .scoring import compute_score, score_to_label
from .sources import SignalSources, StaticAuthorizationContext

__version__ = "0.1.0"

__all__ = [
    "AuthorizationError",
    "ReputationEngine",
    "ReputationError",
    "ReputationLabel",
    "ReputationScore",
    "SignalBundle",
    "SignalSources",
    "SourceUnavailableError",
    "StaticAuthorizationContext",
    "assemble_bundle",
    "compute_score",
    "score_to_label",
]
