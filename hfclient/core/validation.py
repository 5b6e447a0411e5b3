"""Validation and numeric coercion applied before anything is sent.

Both builders either return a ready-to-send payload or raise
``ValidationError`` naming the offending field. No network I/O happens here.
"""

from __future__ import annotations

import io
import json
import math
import re
from typing import Any

import pandas as pd

from hfclient.core.contracts import (
    FLAG_FIELDS,
    FLOAT_TEXT_FIELDS,
    INT_TEXT_FIELDS,
    REQUEST_FIELDS,
    PatientRecord,
    PredictionRequest,
    SelectedFile,
)
from hfclient.core.errors import ValidationError

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

TARGET_COLUMN = "DEATH_EVENT"
RETRAIN_COLUMNS: tuple[str, ...] = REQUEST_FIELDS + (TARGET_COLUMN,)


def parse_int_field(name: str, raw: str) -> int:
    s = (raw or "").strip()
    if not _INT_RE.match(s):
        raise ValidationError(name)
    return int(s)


def parse_float_field(name: str, raw: str) -> float:
    s = (raw or "").strip()
    if not _FLOAT_RE.match(s):
        raise ValidationError(name)
    v = float(s)
    if not math.isfinite(v):
        raise ValidationError(name)
    return v


def build_prediction_request(record: PatientRecord) -> PredictionRequest:
    """Return the numeric projection of ``record``.

    Fields are checked in wire order and the first bad one is reported.
    Yes/no fields and ``ejection_fraction`` pass through unchanged.
    """
    values: dict[str, Any] = {}
    for name in REQUEST_FIELDS:
        raw = getattr(record, name)
        if name in INT_TEXT_FIELDS:
            values[name] = parse_int_field(name, raw)
        elif name in FLOAT_TEXT_FIELDS:
            values[name] = parse_float_field(name, raw)
        else:
            values[name] = int(raw)
    return PredictionRequest(**values)


def _read_dataset(selected: SelectedFile) -> pd.DataFrame:
    if not selected.data:
        raise ValidationError("file", f"Selected file {selected.name!r} is empty")
    try:
        return pd.read_csv(io.BytesIO(selected.data))
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ValidationError("file", f"Could not read {selected.name!r} as CSV: {exc}") from exc


def build_retrain_payload(selected: SelectedFile | None, *, attach_file: bool = True) -> dict[str, Any]:
    """Build the /retrain request body for the selected dataset.

    With ``attach_file=False`` the body is an empty object and the file is
    only required to be selected.
    """
    if selected is None:
        raise ValidationError("file", "No file selected for retraining")
    if not attach_file:
        return {}

    df = _read_dataset(selected)
    missing = [c for c in RETRAIN_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError("file", f"{selected.name!r} is missing columns: {', '.join(missing)}")
    if df.empty:
        raise ValidationError("file", f"{selected.name!r} has no rows")

    data = df[list(RETRAIN_COLUMNS)].apply(pd.to_numeric, errors="coerce")
    not_numeric = [c for c in RETRAIN_COLUMNS if data[c].isna().any()]
    if not_numeric:
        raise ValidationError(
            "file", f"{selected.name!r} has blank or non-numeric values in: {', '.join(not_numeric)}"
        )
    not_flags = [c for c in sorted(FLAG_FIELDS) + [TARGET_COLUMN] if not data[c].isin((0, 1)).all()]
    if not_flags:
        raise ValidationError("file", f"{selected.name!r} has values other than 0/1 in: {', '.join(not_flags)}")

    records = json.loads(data.to_json(orient="records"))
    return {"filename": selected.name, "records": records}
