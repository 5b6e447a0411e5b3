from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal

from hfclient.core.errors import DecodeError

# Wire order of the /predict body.
REQUEST_FIELDS: tuple[str, ...] = (
    "age",
    "anaemia",
    "creatinine_phosphokinase",
    "diabetes",
    "ejection_fraction",
    "high_blood_pressure",
    "platelets",
    "serum_creatinine",
    "serum_sodium",
    "sex",
    "smoking",
    "time",
)

INT_TEXT_FIELDS: frozenset[str] = frozenset(
    {"age", "creatinine_phosphokinase", "serum_sodium", "time"}
)
FLOAT_TEXT_FIELDS: frozenset[str] = frozenset({"platelets", "serum_creatinine"})
TEXT_FIELDS: frozenset[str] = INT_TEXT_FIELDS | FLOAT_TEXT_FIELDS
FLAG_FIELDS: frozenset[str] = frozenset(
    {"sex", "anaemia", "diabetes", "high_blood_pressure", "smoking"}
)

EJECTION_FRACTION_MIN = 0
EJECTION_FRACTION_MAX = 100
EJECTION_FRACTION_DEFAULT = 50


def clamp_ejection_fraction(value: int) -> int:
    return max(EJECTION_FRACTION_MIN, min(EJECTION_FRACTION_MAX, int(value)))


def _coerce_flag(name: str, value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int) and value in (0, 1):
        return value
    if isinstance(value, str) and value.strip() in {"0", "1"}:
        return int(value.strip())
    raise ValueError(f"{name} must be 0 or 1, got {value!r}")


@dataclass
class PatientRecord:
    """User-entered clinical fields, edited one field at a time.

    Numeric fields stay as raw text until a request is built; only
    ``ejection_fraction`` is stored as an int and it is clamped to [0, 100]
    whenever it changes.
    """

    age: str = ""
    sex: int = 0
    anaemia: int = 0
    diabetes: int = 0
    high_blood_pressure: int = 0
    smoking: int = 0
    creatinine_phosphokinase: str = ""
    platelets: str = ""
    serum_creatinine: str = ""
    serum_sodium: str = ""
    time: str = ""
    ejection_fraction: int = EJECTION_FRACTION_DEFAULT

    def set_field(self, name: str, value: Any) -> "PatientRecord":
        """Set one field and return the record.

        Raises ``KeyError`` for unknown fields and ``ValueError`` when a 0/1
        field receives anything else; the record is left unchanged then.
        """
        if name == "ejection_fraction":
            return self.set_ejection_fraction(value)
        if name in FLAG_FIELDS:
            setattr(self, name, _coerce_flag(name, value))
            return self
        if name in TEXT_FIELDS:
            setattr(self, name, "" if value is None else str(value))
            return self
        raise KeyError(f"Unknown patient field: {name}")

    def toggle(self, name: str) -> "PatientRecord":
        if name not in FLAG_FIELDS:
            raise KeyError(f"Not a yes/no field: {name}")
        setattr(self, name, 0 if getattr(self, name) else 1)
        return self

    def set_ejection_fraction(self, value: Any) -> "PatientRecord":
        if isinstance(value, str):
            value = int(value.strip())
        self.ejection_fraction = clamp_ejection_fraction(value)
        return self

    def adjust_ejection_fraction(self, delta: int) -> "PatientRecord":
        return self.set_ejection_fraction(self.ejection_fraction + int(delta))

    def copy(self) -> "PatientRecord":
        return replace(self)


@dataclass(frozen=True)
class PredictionRequest:
    age: int
    anaemia: int
    creatinine_phosphokinase: int
    diabetes: int
    ejection_fraction: int
    high_blood_pressure: int
    platelets: float
    serum_creatinine: float
    serum_sodium: int
    sex: int
    smoking: int
    time: int

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _require_number(d: dict[str, Any], key: str) -> float:
    if key not in d:
        raise DecodeError(f"Response is missing {key!r}")
    v = d[key]
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise DecodeError(f"Response field {key!r} is not a number: {v!r}")
    v = float(v)
    if not math.isfinite(v):
        raise DecodeError(f"Response field {key!r} is not finite: {v!r}")
    return v


@dataclass(frozen=True)
class PredictionResult:
    death_probability: float
    death_risk: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Any) -> "PredictionResult":
        if not isinstance(d, dict):
            raise DecodeError(f"Expected a JSON object, got {type(d).__name__}")
        prob = _require_number(d, "death_probability")
        if not 0.0 <= prob <= 1.0:
            raise DecodeError(f"death_probability out of range: {prob}")
        risk = d.get("death_risk")
        if not isinstance(risk, str):
            raise DecodeError(f"death_risk must be a string, got {risk!r}")
        return cls(death_probability=prob, death_risk=risk)


@dataclass(frozen=True)
class RetrainResult:
    accuracy: float
    loss: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Any) -> "RetrainResult":
        if not isinstance(d, dict):
            raise DecodeError(f"Expected a JSON object, got {type(d).__name__}")
        accuracy = _require_number(d, "accuracy")
        loss = _require_number(d, "loss")
        if not 0.0 <= accuracy <= 1.0:
            raise DecodeError(f"accuracy out of range: {accuracy}")
        if loss < 0.0:
            raise DecodeError(f"loss must be non-negative: {loss}")
        return cls(accuracy=accuracy, loss=loss)


@dataclass(frozen=True)
class SelectedFile:
    """A dataset chosen through the file picker.

    Built from a local path (CLI) or an uploaded-file object exposing
    ``name`` and ``getvalue()`` (Streamlit).
    """

    name: str
    data: bytes = field(repr=False)

    @classmethod
    def from_path(cls, path: str | Path) -> "SelectedFile":
        p = Path(path)
        return cls(name=p.name, data=p.read_bytes())

    @classmethod
    def from_upload(cls, upload: Any) -> "SelectedFile":
        return cls(name=str(upload.name), data=bytes(upload.getvalue()))

    @property
    def size(self) -> int:
        return len(self.data)


RetrainStatus = Literal["idle", "picking", "uploading", "succeeded", "failed"]


@dataclass
class RetrainJob:
    selected_file: SelectedFile | None = None
    progress_percent: int = 0
    status: RetrainStatus = "idle"
    result: RetrainResult | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected_file": self.selected_file.name if self.selected_file else None,
            "progress_percent": self.progress_percent,
            "status": self.status,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
        }
