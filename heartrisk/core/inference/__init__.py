"""
Inference Module

Builds reference group profiles and computes heart disease risk scores.
"""
from .model_stats import (
    GroupProfile,
    ModelStats,
    IncompleteModelStatsError,
    compute_model_stats,
)
from .risk_engine import (
    RiskTier,
    ScoringPath,
    risk_score,
    score_with_path,
    distance_risk_score,
    fallback_risk_score,
)

__all__ = [
    "GroupProfile",
    "ModelStats",
    "IncompleteModelStatsError",
    "compute_model_stats",
    "RiskTier",
    "ScoringPath",
    "risk_score",
    "score_with_path",
    "distance_risk_score",
    "fallback_risk_score",
]
