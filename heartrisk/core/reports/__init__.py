"""
Report Module

Presentation payload for a computed risk score.
"""
from .result import RiskResult, Recommendation, build_result, DISCLAIMER

__all__ = [
    "RiskResult",
    "Recommendation",
    "build_result",
    "DISCLAIMER",
]
