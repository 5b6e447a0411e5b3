"""Form sessions owning the mutable prediction and retraining state.

A session is the single owner of its record/job. Mutation methods return the
updated struct and notify subscribers, so a UI re-renders from explicit
events instead of relying on framework reactivity.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from hfclient.api_client import ApiClient
from hfclient.config import ClientConfig, load_config
from hfclient.core.contracts import PatientRecord, PredictionResult, RetrainJob, RetrainStatus, SelectedFile
from hfclient.jobs.handlers import predict_job, retrain_job
from hfclient.jobs.runner import JobRunner, ProgressRamp
from hfclient.jobs.types import JobStatus, JobType
from hfclient.submission_log import create_session_id, make_log_path

log = logging.getLogger(__name__)


def _event_log_path(config: ClientConfig, action: str, session_id: str) -> Path | None:
    if not config.logging.event_log_dir:
        return None
    return make_log_path(action=action, session_id=session_id, log_dir=Path(config.logging.event_log_dir))


class _Observable:
    def __init__(self) -> None:
        self._subscribers: list[Callable[[Any], None]] = []

    def subscribe(self, listener: Callable[[Any], None]) -> Callable[[], None]:
        self._subscribers.append(listener)

        def _unsubscribe() -> None:
            if listener in self._subscribers:
                self._subscribers.remove(listener)

        return _unsubscribe

    def _emit(self, value: Any) -> None:
        for listener in list(self._subscribers):
            listener(value)


class PredictionSession(_Observable):
    """Owns one ``PatientRecord`` and the prediction runner.

    Subscribers receive the session itself after every change to the record
    or to the job status.
    """

    def __init__(
        self,
        client: ApiClient | None = None,
        config: ClientConfig | None = None,
        *,
        session_id: str | None = None,
    ) -> None:
        super().__init__()
        self.config = config or load_config()
        self.client = client or ApiClient(self.config.api)
        self.session_id = session_id or create_session_id()
        self.record = PatientRecord()
        self.runner = JobRunner(
            JobType.PREDICT,
            failure_message=predict_job.FAILURE_MESSAGE,
            event_log_path=_event_log_path(self.config, JobType.PREDICT.value, self.session_id),
        )
        self.runner.subscribe(lambda _status: self._emit(self))

    @property
    def status(self) -> JobStatus:
        return self.runner.status

    @property
    def result(self) -> PredictionResult | None:
        if self.status.state == "SUCCEEDED":
            return self.status.result
        return None

    def set_field(self, name: str, value: Any) -> PatientRecord:
        self.record.set_field(name, value)
        self._emit(self)
        return self.record

    def toggle(self, name: str) -> PatientRecord:
        self.record.toggle(name)
        self._emit(self)
        return self.record

    def set_ejection_fraction(self, value: Any) -> PatientRecord:
        self.record.set_ejection_fraction(value)
        self._emit(self)
        return self.record

    def adjust_ejection_fraction(self, delta: int) -> PatientRecord:
        self.record.adjust_ejection_fraction(delta)
        self._emit(self)
        return self.record

    async def predict(self) -> JobStatus:
        """Submit a snapshot of the current record; returns the terminal status.

        A second call while one is in flight is ignored (status unchanged).
        """
        snapshot = self.record.copy()
        return await self.runner.start(
            lambda report: predict_job.run(snapshot, client=self.client, report=report)
        )

    def dismiss(self) -> bool:
        """Clear the shown result or error."""
        return self.runner.dismiss()

    def reset(self) -> PatientRecord:
        """Discard the record (after a result is acknowledged)."""
        self.runner.dismiss()
        self.record = PatientRecord()
        self._emit(self)
        return self.record


class RetrainSession(_Observable):
    """Owns one ``RetrainJob`` and the retraining runner.

    ``job.status`` adds the ``picking`` state (file dialog open) on top of the
    runner states: IDLE -> idle, RUNNING -> uploading, SUCCEEDED/FAILED as is.
    """

    def __init__(
        self,
        client: ApiClient | None = None,
        config: ClientConfig | None = None,
        *,
        session_id: str | None = None,
    ) -> None:
        super().__init__()
        self.config = config or load_config()
        self.client = client or ApiClient(self.config.api)
        self.session_id = session_id or create_session_id()
        self.job = RetrainJob()
        self.ramp = ProgressRamp(
            step=self.config.retrain.progress_step,
            delay_seconds=self.config.retrain.step_delay_seconds,
        )
        self.runner = JobRunner(
            JobType.RETRAIN,
            failure_message=retrain_job.FAILURE_MESSAGE,
            event_log_path=_event_log_path(self.config, JobType.RETRAIN.value, self.session_id),
        )
        self.runner.subscribe(self._sync_from_runner)

    @property
    def status(self) -> JobStatus:
        return self.runner.status

    def _sync_from_runner(self, status: JobStatus) -> None:
        self.job.progress_percent = status.progress
        if status.state == "RUNNING":
            self.job.status = "uploading"
            self.job.result = None
            self.job.error = None
        elif status.state == "SUCCEEDED":
            self.job.status = "succeeded"
            self.job.result = status.result
        elif status.state == "FAILED":
            self.job.status = "failed"
            self.job.result = None
            self.job.error = status.error
        else:
            self.job.status = "idle"
            self.job.result = None
            self.job.error = None
        self._emit(self.job)

    def begin_pick(self) -> RetrainJob:
        """Mark the file dialog as open. Ignored while uploading."""
        if self.job.status != "uploading":
            self.job.status = "picking"
            self._emit(self.job)
        return self.job

    def select_file(self, ref: SelectedFile | str | Path | Any | None) -> RetrainJob:
        """Record the picker's answer; ``None`` means the dialog was cancelled."""
        if self.job.status == "uploading":
            log.warning("File selection ignored while retraining is in progress")
            return self.job
        if ref is not None:
            if isinstance(ref, SelectedFile):
                self.job.selected_file = ref
            elif isinstance(ref, (str, Path)):
                self.job.selected_file = SelectedFile.from_path(ref)
            else:
                self.job.selected_file = SelectedFile.from_upload(ref)
        if self.job.status == "picking":
            self.job.status = self._resting_status()
        self._emit(self.job)
        return self.job

    def _resting_status(self) -> RetrainStatus:
        state = self.runner.status.state
        if state == "SUCCEEDED":
            return "succeeded"
        if state == "FAILED":
            return "failed"
        return "idle"

    async def retrain(self) -> RetrainJob:
        """Run one retraining submission and return the updated job."""
        selected = self.job.selected_file
        await self.runner.start(
            lambda report: retrain_job.run(
                selected,
                client=self.client,
                report=report,
                ramp=self.ramp,
                attach_file=self.config.retrain.attach_file,
            )
        )
        log.debug("Retrain session %s: %s", self.session_id, self.job.to_dict())
        return self.job

    def dismiss(self) -> bool:
        return self.runner.dismiss()
