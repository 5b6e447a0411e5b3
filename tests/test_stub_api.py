import pytest
from fastapi.testclient import TestClient

from api.main import app

SAMPLE_GOOD = {
    "age": 60,
    "anaemia": 1,
    "creatinine_phosphokinase": 582,
    "diabetes": 0,
    "ejection_fraction": 38,
    "high_blood_pressure": 1,
    "platelets": 265000.0,
    "serum_creatinine": 1.9,
    "serum_sodium": 130,
    "sex": 1,
    "smoking": 0,
    "time": 4,
}


# Fixture for the test client (synchronous)
@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def test_health_check(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_predict_accepts_the_client_body(client: TestClient):
    response = client.post("/predict", json=SAMPLE_GOOD)

    assert response.status_code == 200
    body = response.json()
    assert 0.0 <= body["death_probability"] <= 1.0
    assert body["death_risk"] in {"High", "Low"}


def test_predict_rejects_missing_field(client: TestClient):
    bad = dict(SAMPLE_GOOD)
    bad.pop("serum_sodium")

    response = client.post("/predict", json=bad)

    assert response.status_code == 422


def test_predict_rejects_non_flag_value(client: TestClient):
    response = client.post("/predict", json={**SAMPLE_GOOD, "smoking": 3})
    assert response.status_code == 422


def test_retrain_with_rows(client: TestClient):
    rows = [{**SAMPLE_GOOD, "DEATH_EVENT": 1}, {**SAMPLE_GOOD, "time": 250, "DEATH_EVENT": 0}]

    response = client.post("/retrain", json={"filename": "heart.csv", "records": rows})

    assert response.status_code == 200
    body = response.json()
    assert 0.0 <= body["accuracy"] <= 1.0
    assert body["loss"] >= 0.0


def test_retrain_accepts_placeholder_body(client: TestClient):
    response = client.post("/retrain", json={})
    assert response.status_code == 200
    assert response.json()["accuracy"] == 0.5


def test_client_decodes_stub_responses(client: TestClient):
    from hfclient.core.contracts import PredictionResult, RetrainResult

    pred = PredictionResult.from_dict(client.post("/predict", json=SAMPLE_GOOD).json())
    assert pred.death_risk in {"High", "Low"}

    res = RetrainResult.from_dict(client.post("/retrain", json={}).json())
    assert res.loss > 0


def test_retrain_accepts_fractional_ages(client: TestClient):
    row = {**SAMPLE_GOOD, "age": 60.667, "DEATH_EVENT": 1}

    response = client.post("/retrain", json={"filename": "heart.csv", "records": [row]})

    assert response.status_code == 200


def test_retrain_accepts_payload_built_from_csv(client: TestClient, training_csv_bytes):
    from hfclient.core.contracts import SelectedFile
    from hfclient.core.validation import build_retrain_payload

    data = training_csv_bytes + b"60.667,0,7861,0,38,0,263358.03,1.1,136,1,0,6,1\n"
    payload = build_retrain_payload(SelectedFile(name="heart.csv", data=data))

    response = client.post("/retrain", json=payload)

    assert response.status_code == 200
    assert 0.0 <= response.json()["accuracy"] <= 1.0
