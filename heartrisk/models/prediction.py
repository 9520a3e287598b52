"""
Prediction API Models
"""
from pydantic import BaseModel, Field
from typing import Dict, Literal, List, Optional

from heartrisk.core.dataset.records import ChestPainType, Sex


class PredictionRequest(BaseModel):
    """Form fields of the risk calculator."""
    age: float = Field(..., gt=0, le=120, description="Age in years")
    sex: Sex
    cp: ChestPainType = Field(..., description="Chest pain type: typical, atypical, non-anginal, asymptomatic")
    trestbps: float = Field(..., gt=0, le=300, description="Resting blood pressure (mm Hg)")
    chol: float = Field(..., gt=0, le=1000, description="Serum cholesterol (mg/dl)")
    fbs: Literal["yes", "no"] = Field(..., description="Fasting blood sugar > 120 mg/dl")
    thalach: float = Field(..., gt=0, le=250, description="Maximum heart rate achieved (bpm)")
    exang: Literal["yes", "no"] = Field(..., description="Exercise induced angina")


class RecommendationResponse(BaseModel):
    icon: str
    title: str
    text: str


class PredictionResponse(BaseModel):
    """Risk score with its presentation payload."""
    prediction_id: str
    timestamp: str
    score: float
    percent: int
    tier: str
    title: str
    badge: str
    gauge_degrees: int
    model_path: str
    recommendations: List[RecommendationResponse]
    disclaimer: str


class ModelStatusResponse(BaseModel):
    """Reference dataset load status."""
    state: str
    row_count: Optional[int] = None
    presence_profile: Optional[Dict[str, float]] = None
    absence_profile: Optional[Dict[str, float]] = None
    failure_reason: Optional[str] = None


class DatasetSummaryResponse(BaseModel):
    """Descriptive statistics of an uploaded CSV."""
    filename: Optional[str] = None
    total_rows: int
    valid_rows: int
    presence_count: int
    absence_count: int
    averages: Dict[str, float]
    male_share: float
    exercise_angina_share: float
    chest_pain_distribution: Dict[str, int]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    components: Dict[str, str]
