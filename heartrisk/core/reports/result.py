"""
Risk Result Presentation

Turns a risk score into the payload the front end renders: tier badge,
percentage, gauge needle angle and tier recommendations.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

from heartrisk.core.inference.risk_engine import RiskTier, ScoringPath
from heartrisk.utils import round_half_up

DISCLAIMER = "This is a statistical estimate based on your inputs. Not medical advice."

TIER_TITLES: Dict[RiskTier, str] = {
    RiskTier.LOW: "Low Risk",
    RiskTier.MID: "Moderate Risk",
    RiskTier.HIGH: "High Risk",
}


@dataclass(frozen=True)
class Recommendation:
    icon: str
    title: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"icon": self.icon, "title": self.title, "text": self.text}


RECOMMENDATIONS: Dict[RiskTier, List[Recommendation]] = {
    RiskTier.HIGH: [
        Recommendation("⚠️", "Consult a professional",
                       "Please consider scheduling an appointment with a healthcare provider."),
        Recommendation("🥗", "Lifestyle changes",
                       "Adopt a heart-healthy diet, reduce sodium, and avoid trans fats."),
        Recommendation("🚶", "Activity & monitoring",
                       "Regular moderate exercise and routine blood pressure checks."),
    ],
    RiskTier.MID: [
        Recommendation("ℹ️", "Keep track",
                       "Monitor blood pressure and cholesterol levels regularly."),
        Recommendation("🍎", "Diet optimization",
                       "Increase fiber intake and maintain balanced meals."),
        Recommendation("🏃", "Stay active",
                       "Aim for 150 minutes of moderate exercise weekly."),
    ],
    RiskTier.LOW: [
        Recommendation("✅", "Maintain habits",
                       "Great job, keep up your healthy routine and regular checkups."),
        Recommendation("💧", "Hydration & sleep",
                       "Stay hydrated and prioritize quality sleep."),
        Recommendation("🧘", "Stress management",
                       "Incorporate relaxation techniques like deep breathing or yoga."),
    ],
}


@dataclass
class RiskResult:
    """Presentation-ready risk result."""
    score: float
    tier: RiskTier
    path: ScoringPath
    recommendations: List[Recommendation] = field(default_factory=list)

    @property
    def title(self) -> str:
        return TIER_TITLES[self.tier]

    @property
    def badge(self) -> str:
        return f"score-{self.tier.value}"

    @property
    def percent(self) -> int:
        return round_half_up(self.score * 100)

    @property
    def gauge_degrees(self) -> int:
        """Needle angle on a 0-180 degree half dial."""
        return max(0, min(180, round_half_up(self.score * 180)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 4),
            "percent": self.percent,
            "tier": self.tier.value,
            "title": self.title,
            "badge": self.badge,
            "gauge_degrees": self.gauge_degrees,
            "model_path": self.path.value,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "disclaimer": DISCLAIMER,
        }


def build_result(score: float, path: ScoringPath) -> RiskResult:
    """Wrap a finite score with its tier and recommendations."""
    if not np.isfinite(score):
        raise ValueError(f"Cannot present non-finite risk score: {score}")
    tier = RiskTier.from_score(score)
    return RiskResult(score=score, tier=tier, path=path, recommendations=list(RECOMMENDATIONS[tier]))
