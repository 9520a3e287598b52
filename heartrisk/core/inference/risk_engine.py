"""
Risk Engine Module

Computes the heart disease risk score for a patient record.

Two scoring paths:
- dataset path: weighted Euclidean distance to the presence/absence group
  profiles, turned into a proximity ratio
- fallback path: fixed-weight logistic heuristic, used while no reference
  statistics are available
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from heartrisk.core.dataset.records import ChestPainType, PatientRecord
from heartrisk.core.inference.model_stats import GroupProfile, ModelStats
from heartrisk.utils import get_logger

logger = get_logger(__name__)


class RiskTier(str, Enum):
    """Coarse risk bucket used for presentation."""
    LOW = "low"
    MID = "mid"
    HIGH = "high"

    @classmethod
    def from_score(cls, score: float) -> "RiskTier":
        """Convert a 0-1 score to a tier."""
        if score >= 0.66:
            return cls.HIGH
        elif score >= 0.33:
            return cls.MID
        return cls.LOW


class ScoringPath(str, Enum):
    """Which scorer produced a result."""
    DATASET = "dataset"
    FALLBACK = "fallback"


# ---- Dataset path ----

CHEST_PAIN_CODES: Dict[ChestPainType, int] = {
    ChestPainType.TYPICAL: 1,
    ChestPainType.ATYPICAL: 2,
    ChestPainType.NON_ANGINAL: 3,
    ChestPainType.ASYMPTOMATIC: 4,
}

# Multipliers on the raw squared difference, in GroupProfile field order
DISTANCE_WEIGHTS: Dict[str, float] = {
    "age": 1.0,
    "bp": 0.01,
    "cholesterol": 0.001,
    "max_hr": 0.02,
    "chest_pain_code": 15.0,
    "sex_code": 10.0,
    "fasting_sugar_code": 8.0,
    "exercise_angina_code": 12.0,
}

_WEIGHT_VECTOR = np.array(list(DISTANCE_WEIGHTS.values()), dtype=np.float64)


def _chest_pain(value) -> Optional[ChestPainType]:
    """Coerce a raw chest pain value; None when unrecognised."""
    try:
        return ChestPainType.from_string(value)
    except ValueError:
        return None


def encode_patient(patient: PatientRecord) -> np.ndarray:
    """Encode a patient the way the reference table stores its columns."""
    return np.array([
        patient.age,
        patient.resting_bp,
        patient.cholesterol,
        patient.max_heart_rate,
        CHEST_PAIN_CODES.get(_chest_pain(patient.chest_pain_type), 1),
        1 if patient.is_male else 0,
        1 if patient.fasting_sugar_high else 0,
        1 if patient.exercise_angina else 0,
    ], dtype=np.float64)


def _profile_vector(profile: GroupProfile) -> np.ndarray:
    return np.array([getattr(profile, name) for name in DISTANCE_WEIGHTS], dtype=np.float64)


def weighted_distance(encoded: np.ndarray, profile: GroupProfile) -> float:
    """Weighted Euclidean distance from an encoded patient to a group profile."""
    diff = encoded - _profile_vector(profile)
    return float(np.sqrt(np.sum(_WEIGHT_VECTOR * diff * diff)))


def group_distances(patient: PatientRecord, stats: ModelStats) -> Tuple[float, float]:
    """Return (distance to presence, distance to absence)."""
    encoded = encode_patient(patient)
    return (
        weighted_distance(encoded, stats.presence_profile),
        weighted_distance(encoded, stats.absence_profile),
    )


def distance_risk_score(patient: PatientRecord, stats: ModelStats) -> float:
    """
    Proximity ratio between the two group profiles.

    Closer to the presence profile gives a value near 1, closer to the
    absence profile a value near 0. Not a calibrated probability.
    """
    dist_presence, dist_absence = group_distances(patient, stats)
    total = dist_presence + dist_absence
    if total == 0:
        return 0.5
    return dist_absence / total


# ---- Fallback path ----

AGE_RANGE = (20.0, 80.0)
BP_RANGE = (90.0, 200.0)
CHOLESTEROL_RANGE = (120.0, 400.0)
MAX_HR_RANGE = (90.0, 210.0)

CHEST_PAIN_RISK: Dict[ChestPainType, float] = {
    ChestPainType.ASYMPTOMATIC: 1.0,
    ChestPainType.NON_ANGINAL: 0.7,
    ChestPainType.ATYPICAL: 0.4,
    ChestPainType.TYPICAL: 0.2,
}
DEFAULT_CHEST_PAIN_RISK = 0.2

FALLBACK_WEIGHTS: Dict[str, float] = {
    "age": 0.12,
    "male": 0.08,
    "chest_pain": 0.20,
    "bp": 0.12,
    "cholesterol": 0.12,
    "fasting_sugar": 0.10,
    "max_hr": 0.14,
    "exercise_angina": 0.12,
}
FALLBACK_BIAS = -0.15
LOGISTIC_STEEPNESS = 6.0
LOGISTIC_MIDPOINT = 0.5


def normalize(value: float, bounds: Tuple[float, float]) -> float:
    """Linear map onto [0, 1], clamped. NaN stays NaN."""
    low, high = bounds
    return float(np.clip((value - low) / (high - low), 0.0, 1.0))


def fallback_features(patient: PatientRecord) -> Dict[str, float]:
    """Normalized/indicator inputs of the fallback heuristic."""
    return {
        "age": normalize(patient.age, AGE_RANGE),
        "male": 1.0 if patient.is_male else 0.0,
        "chest_pain": CHEST_PAIN_RISK.get(_chest_pain(patient.chest_pain_type), DEFAULT_CHEST_PAIN_RISK),
        "bp": normalize(patient.resting_bp, BP_RANGE),
        "cholesterol": normalize(patient.cholesterol, CHOLESTEROL_RANGE),
        "fasting_sugar": 1.0 if patient.fasting_sugar_high else 0.0,
        # Higher achieved heart rate lowers risk
        "max_hr": 1.0 - normalize(patient.max_heart_rate, MAX_HR_RANGE),
        "exercise_angina": 1.0 if patient.exercise_angina else 0.0,
    }


def fallback_risk_score(patient: PatientRecord) -> float:
    """Fixed-weight logistic heuristic."""
    features = fallback_features(patient)
    z = FALLBACK_BIAS + sum(FALLBACK_WEIGHTS[name] * features[name] for name in FALLBACK_WEIGHTS)
    sigmoid = 1.0 / (1.0 + np.exp(-LOGISTIC_STEEPNESS * (z - LOGISTIC_MIDPOINT)))
    return float(np.clip(sigmoid, 0.0, 1.0))


# ---- Entry point ----

def score_with_path(patient: PatientRecord, stats: Optional[ModelStats]) -> Tuple[float, ScoringPath]:
    """Score a patient and report which path was used."""
    if stats is None:
        score, path = fallback_risk_score(patient), ScoringPath.FALLBACK
    else:
        score, path = distance_risk_score(patient, stats), ScoringPath.DATASET
    logger.debug(f"Risk score {score:.4f} via {path.value} path")
    return score, path


def risk_score(patient: PatientRecord, stats: Optional[ModelStats] = None) -> float:
    """
    Risk score in [0, 1] for a patient.

    Args:
        patient: Patient record
        stats: Reference statistics, or None while the dataset is unavailable

    Returns:
        Dataset proximity ratio when stats are given, fallback heuristic otherwise
    """
    score, _ = score_with_path(patient, stats)
    return score
