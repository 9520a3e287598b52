"""
Prediction Service - Centralized Risk Scoring Logic
"""
import uuid
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from heartrisk.core.dataset.loader import LoadState, ModelStatsStore, load_reference_dataset
from heartrisk.core.dataset.records import PatientRecord
from heartrisk.core.dataset.summary import summarize_csv
from heartrisk.core.inference.risk_engine import score_with_path
from heartrisk.core.reports.result import build_result
from heartrisk.models.prediction import PredictionRequest
from heartrisk.config import settings

logger = logging.getLogger(__name__)


def to_patient_record(request: PredictionRequest) -> PatientRecord:
    """Map form fields to a PatientRecord."""
    return PatientRecord(
        age=request.age,
        sex=request.sex,
        chest_pain_type=request.cp,
        resting_bp=request.trestbps,
        cholesterol=request.chol,
        fasting_sugar_high=request.fbs == "yes",
        max_heart_rate=request.thalach,
        exercise_angina=request.exang == "yes",
    )


class PredictionService:
    """
    Service class to handle risk prediction business logic.
    Decouples the scoring core from FastAPI endpoints.
    """

    def __init__(self, store: Optional[ModelStatsStore] = None):
        self.store = store or ModelStatsStore()

    async def load_dataset(self, path: Optional[str] = None, label_column: Optional[str] = None) -> LoadState:
        """Load the reference dataset once; failures leave the service on the fallback path."""
        return await load_reference_dataset(
            self.store,
            path or settings.dataset_path,
            label_column or settings.dataset_label_column,
        )

    def predict(self, request: PredictionRequest) -> Dict[str, Any]:
        """
        Score one patient against whatever statistics are published right now.

        Returns:
            Dictionary matching PredictionResponse
        """
        patient = to_patient_record(request)
        score, path = score_with_path(patient, self.store.stats)
        result = build_result(score, path)

        prediction_id = f"PRD-{uuid.uuid4().hex[:8].upper()}"
        logger.info(f"{prediction_id}: score={score:.3f} tier={result.tier.value} path={path.value}")

        return {
            "prediction_id": prediction_id,
            "timestamp": datetime.now().isoformat(),
            **result.to_dict(),
        }

    def model_status(self) -> Dict[str, Any]:
        """Current load state and, once loaded, the group profiles."""
        stats = self.store.stats
        status: Dict[str, Any] = {
            "state": self.store.state.value,
            "failure_reason": self.store.failure_reason,
        }
        if stats is not None:
            status.update(stats.to_dict())
        return status

    def analyze_csv(self, content: bytes, filename: Optional[str] = None) -> Dict[str, Any]:
        """Descriptive statistics of an uploaded table."""
        summary = summarize_csv(content)
        logger.info(f"Analyzed {filename or 'upload'}: {summary.valid_rows}/{summary.total_rows} valid rows")
        return {"filename": filename, **summary.to_dict()}
