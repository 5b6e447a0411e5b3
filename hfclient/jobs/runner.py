from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Awaitable, Callable

from hfclient.core.errors import error_kind
from hfclient.jobs.types import JobStatus, JobType
from hfclient.submission_log import append_event, utc_now_iso

log = logging.getLogger(__name__)

ProgressReporter = Callable[[int], None]
Operation = Callable[[ProgressReporter], Awaitable[Any]]
Listener = Callable[[JobStatus], None]


def clamp_progress(value: int) -> int:
    return max(0, min(100, int(value)))


@dataclass(frozen=True)
class ProgressRamp:
    """Deterministic simulated progress: 0, step, 2*step, ..., 100.

    Each value is reported, then the ramp sleeps ``delay_seconds`` before the
    next one. The values say nothing about real transfer progress.
    """

    step: int = 10
    delay_seconds: float = 0.5

    def __post_init__(self) -> None:
        if not 1 <= int(self.step) <= 100:
            raise ValueError(f"step must be within 1..100, got {self.step}")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")

    def values(self) -> list[int]:
        out = list(range(0, 101, int(self.step)))
        if out[-1] != 100:
            out.append(100)
        return out

    async def run(self, report: ProgressReporter) -> None:
        for value in self.values():
            report(value)
            await asyncio.sleep(self.delay_seconds)


class JobRunner:
    """Run at most one operation at a time and track its lifecycle.

    States: IDLE -> RUNNING -> SUCCEEDED | FAILED. Terminal states return to
    IDLE through ``dismiss()`` or are replaced by the next ``start()``.

    Exceptions raised by the operation never escape ``start()``: they end the
    run in FAILED with ``failure_message`` for the user and the error kind and
    detail for logs.
    """

    def __init__(
        self,
        job_type: JobType,
        *,
        failure_message: str,
        event_log_path: Path | None = None,
    ) -> None:
        self.job_type = job_type
        self.failure_message = failure_message
        self.event_log_path = event_log_path
        self._status = JobStatus()
        self._listeners: list[Listener] = []

    @property
    def status(self) -> JobStatus:
        return self._status

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every status change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, status: JobStatus) -> None:
        self._status = status
        for listener in list(self._listeners):
            listener(status)

    def _event(self, event_type: str, **fields: Any) -> None:
        if self.event_log_path is None:
            return
        try:
            append_event(self.event_log_path, {"type": event_type, "action": self.job_type.value, **fields})
        except OSError as exc:
            log.warning("Could not write %s event to %s: %s", event_type, self.event_log_path, exc)

    def report(self, progress: int) -> None:
        """Progress callback handed to operations; monotonic and clamped to [0, 100]."""
        if not self._status.is_running:
            return
        value = clamp_progress(progress)
        if value <= self._status.progress:
            return
        self._publish(replace(self._status, progress=value))
        self._event("job_progress", progress=value)

    async def start(self, operation: Operation) -> JobStatus:
        """Run ``operation`` to completion unless a run is already in flight.

        While RUNNING this is a no-op: the current status is returned unchanged.
        """
        if self._status.is_running:
            log.warning("%s is already running; start ignored", self.job_type.value)
            self._event("job_busy")
            return self._status

        self._publish(JobStatus(state="RUNNING", progress=0, started_at_utc=utc_now_iso()))
        self._event("job_started")

        try:
            result = await operation(self.report)
        except asyncio.CancelledError:
            self._fail("cancelled", "operation was cancelled")
            raise
        except Exception as exc:  # noqa: BLE001
            kind = error_kind(exc)
            if kind == "unexpected":
                log.exception("%s failed unexpectedly", self.job_type.value)
            else:
                log.error("%s failed (%s): %s", self.job_type.value, kind, exc)
            self._fail(kind, str(exc))
        else:
            self._publish(
                replace(
                    self._status,
                    state="SUCCEEDED",
                    progress=100,
                    finished_at_utc=utc_now_iso(),
                    result=result,
                )
            )
            log.info("%s succeeded", self.job_type.value)
            self._event("job_succeeded", **self._status.to_dict())

        return self._status

    def _fail(self, kind: str, detail: str) -> None:
        self._publish(
            replace(
                self._status,
                state="FAILED",
                finished_at_utc=utc_now_iso(),
                result=None,
                error=self.failure_message,
                error_kind=kind,
                error_detail=detail,
            )
        )
        self._event("job_failed", **self._status.to_dict())

    def dismiss(self) -> bool:
        """Return a finished run to IDLE. Ignored while RUNNING."""
        if not self._status.is_terminal:
            return False
        self._publish(JobStatus())
        self._event("job_dismissed")
        return True
