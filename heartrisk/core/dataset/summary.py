"""
Dataset Summary

Descriptive statistics for an uploaded heart disease table. Independent of
the risk scorer; accepts both the reference column names and the common
UCI short names (age, trestbps, chol, thalach, ...).
"""
from __future__ import annotations
import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import numpy as np
import pandas as pd

from heartrisk.utils import get_logger, round_half_up

logger = get_logger(__name__)

COLUMN_ALIASES: Dict[str, Sequence[str]] = {
    "age": ("Age", "age"),
    "bp": ("BP", "trestbps"),
    "cholesterol": ("Cholesterol", "chol"),
    "max_hr": ("Max HR", "thalach"),
    "sex": ("Sex", "sex"),
    "exercise_angina": ("Exercise angina", "exang"),
    "chest_pain": ("Chest pain type", "cp"),
    "outcome": ("Heart Disease", "target"),
}

CHEST_PAIN_LABELS = {
    1: "typical",
    2: "atypical",
    3: "non-anginal",
    4: "asymptomatic",
}

_REQUIRED_NUMERIC = ("age", "bp", "cholesterol", "max_hr")


class NoValidRowsError(ValueError):
    """No row carries finite age, BP, cholesterol and max HR values."""

    def __init__(self, columns: List[str]):
        self.columns = columns
        super().__init__(
            "Could not find valid numeric data. Expected columns: Age, Sex, "
            "BP (or trestbps), Cholesterol (or chol), Max HR (or thalach). "
            f"Found columns: {', '.join(columns)}"
        )


@dataclass
class DatasetSummary:
    """Aggregate counts and shares of a table."""
    total_rows: int
    valid_rows: int
    presence_count: int
    absence_count: int
    averages: Dict[str, float] = field(default_factory=dict)
    male_share: float = 0.0
    exercise_angina_share: float = 0.0
    chest_pain_distribution: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "presence_count": self.presence_count,
            "absence_count": self.absence_count,
            "averages": {k: round(v, 1) for k, v in self.averages.items()},
            "male_share": round(self.male_share, 3),
            "exercise_angina_share": round(self.exercise_angina_share, 3),
            "chest_pain_distribution": self.chest_pain_distribution,
        }


def _resolve(df: pd.DataFrame, key: str) -> pd.Series:
    """First aliased column present in the frame, with null cells backfilled from later aliases."""
    present = [name for name in COLUMN_ALIASES[key] if name in df.columns]
    if not present:
        return pd.Series([None] * len(df), index=df.index, dtype=object)
    series = df[present[0]]
    for name in present[1:]:
        series = series.where(series.notna(), df[name])
    return series


def _flag_share(series: pd.Series, truthy_text: str) -> float:
    numeric = pd.to_numeric(series, errors="coerce")
    text = series.astype(str).str.strip().str.lower()
    return float(((numeric == 1) | (text == truthy_text)).mean())


def summarize_table(df: pd.DataFrame) -> DatasetSummary:
    """
    Summarize a heart disease table.

    Raises:
        NoValidRowsError: when no row has finite age, BP, cholesterol and max HR
    """
    total_rows = len(df)
    resolved = {key: _resolve(df, key) for key in COLUMN_ALIASES}

    numeric = {key: pd.to_numeric(resolved[key], errors="coerce") for key in _REQUIRED_NUMERIC}
    keep = np.ones(total_rows, dtype=bool)
    for series in numeric.values():
        keep &= np.isfinite(series.to_numpy(dtype=np.float64))

    valid_rows = int(keep.sum())
    logger.info(f"Dataset summary: {valid_rows} valid rows out of {total_rows}")
    if valid_rows == 0:
        raise NoValidRowsError([str(c) for c in df.columns])

    kept = {key: series[keep] for key, series in resolved.items()}

    outcome = kept["outcome"].astype(str).str.strip().str.lower()
    presence_count = int((outcome.str.contains("presence", regex=False) | (outcome == "1")).sum())
    absence_count = int((outcome.str.contains("absence", regex=False) | (outcome == "0")).sum())

    chest_pain = pd.to_numeric(kept["chest_pain"], errors="coerce")
    distribution = {
        label: round_half_up(100 * int((chest_pain == code).sum()) / valid_rows)
        for code, label in CHEST_PAIN_LABELS.items()
    }

    return DatasetSummary(
        total_rows=total_rows,
        valid_rows=valid_rows,
        presence_count=presence_count,
        absence_count=absence_count,
        averages={key: float(numeric[key][keep].mean()) for key in _REQUIRED_NUMERIC},
        male_share=_flag_share(kept["sex"], "male"),
        exercise_angina_share=_flag_share(kept["exercise_angina"], "yes"),
        chest_pain_distribution=distribution,
    )


def summarize_csv(content: bytes) -> DatasetSummary:
    """Parse uploaded CSV bytes and summarize them."""
    df = pd.read_csv(io.BytesIO(content), skip_blank_lines=True)
    return summarize_table(df)
