"""
Model Statistics Module

Builds the presence/absence group profiles from the reference table.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Iterable, Mapping, Union
import math

import pandas as pd

from heartrisk.core.dataset.records import OutcomeLabel, ReferenceColumn
from heartrisk.utils import get_logger

logger = get_logger(__name__)

ReferenceRows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]

# Profile field -> reference table column
PROFILE_COLUMNS: Dict[str, ReferenceColumn] = {
    "age": ReferenceColumn.AGE,
    "bp": ReferenceColumn.BP,
    "cholesterol": ReferenceColumn.CHOLESTEROL,
    "max_hr": ReferenceColumn.MAX_HR,
    "chest_pain_code": ReferenceColumn.CHEST_PAIN,
    "sex_code": ReferenceColumn.SEX,
    "fasting_sugar_code": ReferenceColumn.FASTING_SUGAR,
    "exercise_angina_code": ReferenceColumn.EXERCISE_ANGINA,
}


class IncompleteModelStatsError(ValueError):
    """Raised when a group profile has undefined (NaN) averages."""


@dataclass(frozen=True)
class GroupProfile:
    """Mean feature vector of one outcome group."""
    age: float
    bp: float
    cholesterol: float
    max_hr: float
    chest_pain_code: float
    sex_code: float
    fasting_sugar_code: float
    exercise_angina_code: float

    @classmethod
    def empty(cls) -> "GroupProfile":
        return cls(**{f.name: float("nan") for f in fields(cls)})

    @property
    def is_complete(self) -> bool:
        """False if any average is undefined."""
        return not any(math.isnan(v) for v in asdict(self).values())

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ModelStats:
    """Group profiles computed once from the reference table."""
    presence_profile: GroupProfile
    absence_profile: GroupProfile
    row_count: int

    @property
    def is_complete(self) -> bool:
        return self.presence_profile.is_complete and self.absence_profile.is_complete

    def require_complete(self) -> "ModelStats":
        """Return self, or raise if either profile has NaN averages."""
        missing = [
            label.value
            for label, profile in (
                (OutcomeLabel.PRESENCE, self.presence_profile),
                (OutcomeLabel.ABSENCE, self.absence_profile),
            )
            if not profile.is_complete
        ]
        if missing:
            raise IncompleteModelStatsError(
                f"Undefined group averages for: {', '.join(missing)}"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "presence_profile": self.presence_profile.to_dict(),
            "absence_profile": self.absence_profile.to_dict(),
            "row_count": self.row_count,
        }


def _to_frame(rows: ReferenceRows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    return pd.DataFrame(list(rows))


def _group_profile(group: pd.DataFrame) -> GroupProfile:
    if group.empty:
        return GroupProfile.empty()
    values = {}
    for name, column in PROFILE_COLUMNS.items():
        series = pd.to_numeric(group[column.value], errors="coerce")
        # No skipna: a non-numeric cell makes the whole average undefined
        values[name] = float(series.mean(skipna=False))
    return GroupProfile(**values)


def compute_model_stats(
    rows: ReferenceRows,
    label_column: str = ReferenceColumn.OUTCOME.value,
) -> ModelStats:
    """
    Compute presence and absence group profiles.

    Rows are partitioned by case-insensitive substring match on the outcome
    label. Each outcome has its own mask, so a row mentioning both lands
    in both groups; rows mentioning neither are left out of both.
    An empty group yields a profile of NaN averages.

    Args:
        rows: DataFrame or sequence of row mappings from the reference table
        label_column: Column holding the outcome label

    Returns:
        ModelStats with both profiles and the total input row count
    """
    df = _to_frame(rows)
    row_count = len(df)

    if row_count == 0:
        logger.warning("Reference table is empty; both group profiles undefined")
        return ModelStats(GroupProfile.empty(), GroupProfile.empty(), 0)

    # Independent masks: a label mentioning both outcomes lands in both groups
    presence_mask = OutcomeLabel.PRESENCE.mask(df[label_column])
    absence_mask = OutcomeLabel.ABSENCE.mask(df[label_column])
    presence = df[presence_mask.to_numpy()]
    absence = df[absence_mask.to_numpy()]

    logger.info(
        f"Reference table: {row_count} rows, {len(presence)} presence, "
        f"{len(absence)} absence, {int((~(presence_mask | absence_mask)).sum())} unlabeled"
    )
    for label, group in ((OutcomeLabel.PRESENCE, presence), (OutcomeLabel.ABSENCE, absence)):
        if group.empty:
            logger.warning(f"No '{label.value}' rows in reference table; profile averages undefined")

    return ModelStats(
        presence_profile=_group_profile(presence),
        absence_profile=_group_profile(absence),
        row_count=row_count,
    )
