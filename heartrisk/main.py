"""
Heart Disease Risk Service - FastAPI Application

Main application entry point with API endpoints for:
- Risk prediction from the calculator form fields
- Reference dataset status
- Uploaded CSV summary statistics
"""
from fastapi import FastAPI, HTTPException, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
from typing import Optional
import asyncio
from dotenv import load_dotenv

# Load environment variables
load_dotenv()
import logging

import pandas as pd

from heartrisk.config import settings
from heartrisk.core.dataset.summary import NoValidRowsError
from heartrisk.models.prediction import (
    PredictionRequest,
    PredictionResponse,
    ModelStatusResponse,
    DatasetSummaryResponse,
    HealthResponse,
)
from heartrisk.services.prediction import PredictionService

logger = logging.getLogger(__name__)

# ---- FastAPI Application ----

app = FastAPI(
    title="Heart Disease Risk API",
    description="Demo heart disease risk score calibrated on a reference dataset. Not medical advice.",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

service = PredictionService()
_load_task: Optional[asyncio.Task] = None


def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now().isoformat(),
        components={
            "api": "healthy",
            "risk_engine": "ready",
            "reference_dataset": service.store.state.value,
        }
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.get(f"{settings.api_prefix}/model", response_model=ModelStatusResponse, tags=["Model"])
async def model_status():
    """Reference dataset load state and group profiles."""
    return ModelStatusResponse(**service.model_status())


@app.post(f"{settings.api_prefix}/predict", response_model=PredictionResponse, tags=["Prediction"])
async def predict(request: PredictionRequest):
    """
    Score a patient.

    Uses the dataset distance scorer once the reference dataset is loaded,
    the fallback heuristic before that or after a failed load.
    """
    try:
        return PredictionResponse(**service.predict(request))
    except ValueError as e:
        logger.error(f"Prediction failed: {e}")
        raise HTTPException(status_code=500, detail=f"Prediction failed: {str(e)}")


@app.post(f"{settings.api_prefix}/dataset/analyze", response_model=DatasetSummaryResponse, tags=["Dataset"])
async def analyze_dataset(file: UploadFile = File(...)):
    """Descriptive statistics for an uploaded heart disease CSV."""
    content = await file.read()
    if not content.strip():
        raise HTTPException(status_code=400, detail="Please choose a non-empty CSV file.")

    try:
        summary = service.analyze_csv(content, filename=file.filename)
    except NoValidRowsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to parse CSV {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Failed to parse CSV: {str(e)}")

    return DatasetSummaryResponse(**summary)


# ---- Application Lifecycle ----

@app.on_event("startup")
async def startup_event():
    """Schedule the one-time reference dataset load."""
    global _load_task
    logger.info("Heart Disease Risk API starting up...")
    if settings.load_dataset_on_startup:
        # Requests arriving before the load finishes use the fallback scorer
        _load_task = asyncio.create_task(service.load_dataset())
    logger.info("API ready to accept requests")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Heart Disease Risk API shutting down...")
    if _load_task is not None and not _load_task.done():
        await _load_task


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
