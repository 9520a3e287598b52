"""
API Tests

Exercise the FastAPI endpoints with TestClient. The startup dataset load is
not triggered (no lifespan context); each test installs its own service.
"""
import pytest
from fastapi.testclient import TestClient

from heartrisk import main
from heartrisk.core.dataset.loader import ModelStatsStore
from heartrisk.core.inference.model_stats import GroupProfile, ModelStats
from heartrisk.services.prediction import PredictionService


@pytest.fixture
def service(monkeypatch) -> PredictionService:
    svc = PredictionService(ModelStatsStore())
    monkeypatch.setattr(main, "service", svc)
    return svc


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(main.app)


@pytest.fixture
def two_row_stats() -> ModelStats:
    return ModelStats(
        presence_profile=GroupProfile(60, 150, 280, 120, 4, 1, 1, 1),
        absence_profile=GroupProfile(40, 110, 180, 170, 1, 0, 0, 0),
        row_count=2,
    )


@pytest.fixture
def high_risk_form():
    return {
        "age": 50, "sex": "male", "cp": "asymptomatic", "trestbps": 145,
        "chol": 260, "fbs": "yes", "thalach": 130, "exang": "yes",
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["components"]["reference_dataset"] == "unloaded"


def test_predict_fallback_high(client, high_risk_form):
    response = client.post("/api/v1/predict", json=high_risk_form)
    assert response.status_code == 200
    body = response.json()
    assert body["model_path"] == "fallback"
    assert body["tier"] == "high"
    assert body["title"] == "High Risk"
    assert body["percent"] == 68
    assert body["prediction_id"].startswith("PRD-")
    assert len(body["recommendations"]) == 3


def test_predict_with_loaded_stats(client, service, two_row_stats):
    service.store.publish(two_row_stats)
    form = {
        "age": 60, "sex": "male", "cp": "asymptomatic", "trestbps": 150,
        "chol": 280, "fbs": "yes", "thalach": 120, "exang": "yes",
    }
    response = client.post("/api/v1/predict", json=form)
    assert response.status_code == 200
    body = response.json()
    assert body["model_path"] == "dataset"
    assert body["score"] == 1.0
    assert body["gauge_degrees"] == 180


def test_predict_after_failed_load_uses_fallback(client, service, high_risk_form):
    service.store.fail("FileNotFoundError: missing.csv")
    response = client.post("/api/v1/predict", json=high_risk_form)
    assert response.status_code == 200
    assert response.json()["model_path"] == "fallback"


def test_predict_rejects_bad_input(client, high_risk_form):
    high_risk_form["cp"] = "sharp"
    assert client.post("/api/v1/predict", json=high_risk_form).status_code == 422

    high_risk_form["cp"] = "typical"
    high_risk_form["age"] = "fifty"
    assert client.post("/api/v1/predict", json=high_risk_form).status_code == 422


def test_model_status(client, service, two_row_stats):
    assert client.get("/api/v1/model").json()["state"] == "unloaded"

    service.store.publish(two_row_stats)
    body = client.get("/api/v1/model").json()
    assert body["state"] == "loaded"
    assert body["row_count"] == 2
    assert body["presence_profile"]["age"] == 60.0
    assert body["failure_reason"] is None


def test_model_status_failed(client, service):
    service.store.fail("IncompleteModelStatsError: Undefined group averages for: absence")
    body = client.get("/api/v1/model").json()
    assert body["state"] == "failed"
    assert "absence" in body["failure_reason"]
    assert body["presence_profile"] is None


def test_analyze_dataset(client):
    content = (
        b"Age,Sex,Chest pain type,BP,Cholesterol,Max HR,Exercise angina,Heart Disease\n"
        b"70,1,4,130,322,109,0,Presence\n"
        b"67,0,3,115,564,160,1,Absence\n"
    )
    response = client.post(
        "/api/v1/dataset/analyze",
        files={"file": ("heart.csv", content, "text/csv")},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["filename"] == "heart.csv"
    assert body["valid_rows"] == 2
    assert body["presence_count"] == 1
    assert body["chest_pain_distribution"]["asymptomatic"] == 50


def test_analyze_dataset_no_valid_rows(client):
    response = client.post(
        "/api/v1/dataset/analyze",
        files={"file": ("names.csv", b"name,score\na,1\n", "text/csv")},
    )
    assert response.status_code == 400
    assert "Found columns: name, score" in response.json()["detail"]


def test_analyze_dataset_empty_upload(client):
    response = client.post(
        "/api/v1/dataset/analyze",
        files={"file": ("empty.csv", b"", "text/csv")},
    )
    assert response.status_code == 400
