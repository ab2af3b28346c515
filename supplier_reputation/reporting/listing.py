"""
Admin supplier listing over reputation scores.

Turns a batch of ReputationScore objects into a pandas DataFrame that the admin
discovery views filter by label and rank:

- scored suppliers first, highest score first;
- suppliers without a score after every scored supplier;
- ties broken by supplier name (then id).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from ..models.reputation_models import COMPONENT_FIELDS, ReputationLabel, ReputationScore
from ..utils.normalization import normalize_label

__all__ = [
    "REPUTATION_COLUMNS",
    "build_reputation_frame",
    "filter_reputation_frame",
    "format_label",
    "parse_label_filter",
    "rank_reputation_frame",
]

REPUTATION_COLUMNS: list[str] = ["supplier_id", "supplier_name", "score", "label", *COMPONENT_FIELDS]

_LABEL_DISPLAY = {
    ReputationLabel.EXCELLENT: "Excellent",
    ReputationLabel.GOOD: "Good",
    ReputationLabel.FAIR: "Fair",
    ReputationLabel.LIMITED: "Limited",
    ReputationLabel.UNKNOWN: "Unknown",
}


def parse_label_filter(value: Any) -> ReputationLabel | None:
    """Label from a query-string value; None (no filter) for 'all', blanks and junk."""
    normalized = normalize_label(value)
    if not normalized or normalized == "all":
        return None
    try:
        return ReputationLabel(normalized)
    except ValueError:
        return None


def format_label(label: ReputationLabel | str | None) -> str:
    if label is None:
        return _LABEL_DISPLAY[ReputationLabel.UNKNOWN]
    try:
        return _LABEL_DISPLAY[ReputationLabel(normalize_label(label) or "unknown")]
    except ValueError:
        return _LABEL_DISPLAY[ReputationLabel.UNKNOWN]


def build_reputation_frame(
    scores: Mapping[str, ReputationScore] | Iterable[ReputationScore],
    supplier_names: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """
    Flatten scores into one row per supplier.

    Args:
        scores: Output of ReputationEngine.score_for_suppliers (or any iterable of scores)
        supplier_names: Optional display names; missing names fall back to the id

    Returns:
        DataFrame with REPUTATION_COLUMNS; score and component columns are
        nullable integers
    """
    items = scores.values() if isinstance(scores, Mapping) else scores
    names = supplier_names or {}

    records = []
    for score in items:
        record = score.model_dump(mode="json")
        record["supplier_name"] = names.get(score.supplier_id) or score.supplier_id
        records.append(record)

    df = pd.DataFrame.from_records(records, columns=REPUTATION_COLUMNS)
    for column in ("score", *COMPONENT_FIELDS):
        df[column] = df[column].astype("Int64")
    df["label"] = df["label"].astype("string")
    return df


def filter_reputation_frame(df: pd.DataFrame, label: ReputationLabel | str | None) -> pd.DataFrame:
    """Rows whose label matches; the whole frame when label is None or 'all'."""
    wanted = label if isinstance(label, ReputationLabel) else parse_label_filter(label)
    if wanted is None:
        return df
    return df[df["label"] == wanted.value]


def rank_reputation_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Score descending with unscored suppliers last, then by name and id."""
    if df.empty:
        return df.reset_index(drop=True)

    ranked = df.assign(
        _rank_score=df["score"].fillna(-1).astype(int),
        _rank_name=df["supplier_name"].fillna("").astype(str).str.lower(),
    )
    ranked = ranked.sort_values(
        ["_rank_score", "_rank_name", "supplier_id"],
        ascending=[False, True, True],
        kind="mergesort",
    )
    return ranked.drop(columns=["_rank_score", "_rank_name"]).reset_index(drop=True)
