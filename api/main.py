from __future__ import annotations

import math
from typing import List, Literal

from fastapi import FastAPI
from pydantic import BaseModel, Field

app = FastAPI(
    title="Heart Failure Prediction Stub API",
    description="Local stand-in for the remote prediction/retraining service. "
    "Implements the same HTTP contract with placeholder numbers.",
    version="1.0.0",
)

Flag = Literal[0, 1]


class PredictIn(BaseModel):
    age: int = Field(..., ge=0)
    anaemia: Flag
    creatinine_phosphokinase: int = Field(..., ge=0)
    diabetes: Flag
    ejection_fraction: int = Field(..., ge=0, le=100)
    high_blood_pressure: Flag
    platelets: float = Field(..., ge=0)
    serum_creatinine: float = Field(..., ge=0)
    serum_sodium: int = Field(..., ge=0)
    sex: Flag
    smoking: Flag
    time: int = Field(..., ge=0)


class PredictOut(BaseModel):
    death_probability: float
    death_risk: str


class TrainingRow(PredictIn):
    # Published training data records some ages as fractions of a year.
    age: float = Field(..., ge=0)
    DEATH_EVENT: Flag


class RetrainIn(BaseModel):
    filename: str | None = None
    records: List[TrainingRow] = Field(default_factory=list)


class RetrainOut(BaseModel):
    accuracy: float
    loss: float


HIGH_RISK_THRESHOLD = 0.5


def placeholder_score(p: PredictIn) -> float:
    """Fixed logistic score over a few inputs; stands in for the real model."""
    z = (
        0.05 * (p.age - 60)
        - 0.06 * (p.ejection_fraction - 38)
        + 0.8 * (p.serum_creatinine - 1.4)
        - 0.02 * (p.time - 130)
    )
    z = max(-50.0, min(50.0, z))
    return 1.0 / (1.0 + math.exp(-z))


@app.post("/predict", response_model=PredictOut, summary="Predict death risk")
async def predict(req: PredictIn):
    prob = placeholder_score(req)
    return PredictOut(
        death_probability=round(prob, 4),
        death_risk="High" if prob >= HIGH_RISK_THRESHOLD else "Low",
    )


@app.post("/retrain", response_model=RetrainOut, summary="Retrain on uploaded rows")
async def retrain(req: RetrainIn):
    """
    Scores the placeholder model against the uploaded rows and reports
    accuracy and log loss. An empty body is accepted and yields fixed numbers.
    """
    if not req.records:
        return RetrainOut(accuracy=0.5, loss=math.log(2))

    correct = 0
    total_loss = 0.0
    for row in req.records:
        prob = min(max(placeholder_score(row), 1e-7), 1 - 1e-7)
        predicted = 1 if prob >= HIGH_RISK_THRESHOLD else 0
        correct += int(predicted == row.DEATH_EVENT)
        total_loss += -math.log(prob if row.DEATH_EVENT else 1 - prob)

    n = len(req.records)
    return RetrainOut(accuracy=correct / n, loss=total_loss / n)


@app.get("/health", summary="Health check", response_description="API health status")
async def health_check():
    """
    Checks the health of the API.
    """
    return {"status": "ok"}

# To run this API:
# uvicorn api.main:app --reload --port 8000
# Then point the client at it: HF_CLIENT_API_URL=http://127.0.0.1:8000
