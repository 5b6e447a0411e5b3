from __future__ import annotations

import logging

from hfclient.api_client import ApiClient
from hfclient.core.contracts import PatientRecord, PredictionResult
from hfclient.core.validation import build_prediction_request
from hfclient.jobs.runner import ProgressReporter

log = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to get prediction. Please try again."


async def run(record: PatientRecord, *, client: ApiClient, report: ProgressReporter | None = None) -> PredictionResult:
    """Validate ``record``, POST it to /predict and decode the answer.

    Raises ``ValidationError`` before any network call when a field does not
    parse, ``TransportError`` for network/HTTP failures and ``DecodeError``
    when the body is not a prediction. Nothing is retried.
    """

    request = build_prediction_request(record)
    log.info("Submitting prediction request")
    log.debug("Prediction payload: %s", request.to_dict())

    result = await client.predict_async(request)
    if report is not None:
        report(100)
    return result
