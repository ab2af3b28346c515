"""Tabular views over computed reputation scores."""

from .listing import (
    REPUTATION_COLUMNS,
    build_reputation_frame,
    filter_reputation_frame,
    format_label,
    parse_label_filter,
    rank_reputation_frame,
)

__all__ = [
    "REPUTATION_COLUMNS",
    "build_reputation_frame",
    "filter_reputation_frame",
    "format_label",
    "parse_label_filter",
    "rank_reputation_frame",
]
