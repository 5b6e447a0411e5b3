"""Formatting helpers for UI and CLI display."""

from __future__ import annotations

import pandas as pd

from hfclient.core.contracts import PredictionResult, RetrainResult


def format_timestamp(ts: str | None) -> str | None:
    """Render an event timestamp as UTC ``YYYY-MM-DD HH:MM:SS``; None when unparseable."""
    if not ts:
        return None
    parsed = pd.to_datetime(str(ts), utc=True, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_prediction(result: PredictionResult) -> str:
    """Two-line alert body shown after a successful prediction."""
    return f"Death Probability: {result.death_probability:.2f}\nDeath Risk: {result.death_risk}"


def format_retrain_result(result: RetrainResult) -> tuple[str, str]:
    """Return (accuracy, loss) as display strings, e.g. ("87.00%", "0.2310")."""
    return f"{result.accuracy * 100:.2f}%", f"{result.loss:.4f}"


def format_progress(percent: int) -> str:
    return f"Progress: {int(percent)}%"


def yes_no(value: int) -> str:
    return "Yes" if value else "No"
