from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Literal


class JobType(str, Enum):
    PREDICT = "predict"
    RETRAIN = "retrain"


JobState = Literal["IDLE", "RUNNING", "SUCCEEDED", "FAILED"]

TERMINAL_STATES: frozenset[str] = frozenset({"SUCCEEDED", "FAILED"})


@dataclass(frozen=True)
class JobStatus:
    state: JobState = "IDLE"
    progress: int = 0
    started_at_utc: str | None = None
    finished_at_utc: str | None = None
    result: Any = None
    error: str | None = None
    error_kind: str | None = None
    error_detail: str | None = None

    @property
    def is_running(self) -> bool:
        return self.state == "RUNNING"

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.result is not None and hasattr(self.result, "to_dict"):
            d["result"] = self.result.to_dict()
        return d
