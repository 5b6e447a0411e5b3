from __future__ import annotations

import logging

from hfclient.api_client import ApiClient
from hfclient.core.contracts import RetrainResult, SelectedFile
from hfclient.core.validation import build_retrain_payload
from hfclient.jobs.runner import ProgressRamp, ProgressReporter

log = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to retrain model. Please try again."


async def run(
    selected_file: SelectedFile | None,
    *,
    client: ApiClient,
    report: ProgressReporter,
    ramp: ProgressRamp | None = None,
    attach_file: bool = True,
) -> RetrainResult:
    """Run one retraining submission.

    Order:
    1. build the payload (no file selected -> ``ValidationError``, progress stays 0)
    2. walk the simulated progress ramp to 100
    3. POST /retrain and decode ``{accuracy, loss}``
    """

    payload = build_retrain_payload(selected_file, attach_file=attach_file)
    if selected_file is not None:
        log.info(
            "Retraining with %s (%d bytes, %d rows attached)",
            selected_file.name,
            selected_file.size,
            len(payload.get("records", [])),
        )

    await (ramp or ProgressRamp()).run(report)

    return await client.retrain_async(payload)
