"""
Reputation scoring modules.

This package provides:
- compute_score: pure rubric from a SignalBundle to a ReputationScore
- score_to_label: label bands for a clamped score
"""

from .rubric import clamp_score, compute_score, score_to_label

__all__ = ["clamp_score", "compute_score", "score_to_label"]
