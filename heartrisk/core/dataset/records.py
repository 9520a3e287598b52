"""
Reference Records

Patient input record, categorical encodings and the column layout of the
reference table (Heart_Disease_Prediction.csv).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet

import pandas as pd


class Sex(str, Enum):
    """Patient sex as entered on the form."""
    MALE = "male"
    FEMALE = "female"


class ChestPainType(str, Enum):
    """Chest pain categories, ordered by reference table code (1-4)."""
    TYPICAL = "typical"
    ATYPICAL = "atypical"
    NON_ANGINAL = "non-anginal"
    ASYMPTOMATIC = "asymptomatic"

    @classmethod
    def from_string(cls, name: str) -> "ChestPainType":
        """Parse a chest pain label, accepting common spellings."""
        if isinstance(name, cls):
            return name
        name_lower = str(name).strip().lower().replace("_", "-").replace(" ", "-")
        mapping = {
            "typical": cls.TYPICAL,
            "typical-angina": cls.TYPICAL,
            "atypical": cls.ATYPICAL,
            "atypical-angina": cls.ATYPICAL,
            "non-anginal": cls.NON_ANGINAL,
            "nonanginal": cls.NON_ANGINAL,
            "non-anginal-pain": cls.NON_ANGINAL,
            "asymptomatic": cls.ASYMPTOMATIC,
        }
        if name_lower in mapping:
            return mapping[name_lower]
        raise ValueError(f"Unknown chest pain type: {name}")


class OutcomeLabel(str, Enum):
    """Disease outcome label of a reference row."""
    PRESENCE = "presence"
    ABSENCE = "absence"

    def found_in(self, value: Any) -> bool:
        """Case-insensitive substring match of a raw label cell."""
        return self.value in str(value).lower()

    def mask(self, labels: pd.Series) -> pd.Series:
        """Boolean row mask of label cells mentioning this outcome."""
        text = labels.astype(str).str.lower()
        return text.str.contains(self.value, regex=False, na=False).astype(bool)

    @classmethod
    def match(cls, value: Any) -> FrozenSet["OutcomeLabel"]:
        """
        Every outcome a label cell mentions.

        Empty for cells that mention neither; both for cells that mention both.
        """
        return frozenset(label for label in cls if label.found_in(value))


class ReferenceColumn(str, Enum):
    """Column names of the reference table."""
    AGE = "Age"
    SEX = "Sex"
    CHEST_PAIN = "Chest pain type"
    BP = "BP"
    CHOLESTEROL = "Cholesterol"
    FASTING_SUGAR = "FBS over 120"
    MAX_HR = "Max HR"
    EXERCISE_ANGINA = "Exercise angina"
    OUTCOME = "Heart Disease"


@dataclass(frozen=True)
class PatientRecord:
    """Clinical fields for one scoring request."""
    age: float
    sex: Sex
    chest_pain_type: ChestPainType
    resting_bp: float
    cholesterol: float
    fasting_sugar_high: bool
    max_heart_rate: float
    exercise_angina: bool

    @property
    def is_male(self) -> bool:
        return self.sex == Sex.MALE
