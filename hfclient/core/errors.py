"""Error taxonomy for submissions.

Every failure that can end a predict/retrain run is a ``SubmissionError``.
The ``kind`` attribute survives into logs and the submission event log even
though users only ever see one message per action.
"""

from __future__ import annotations


class SubmissionError(Exception):
    kind = "unexpected"


class ValidationError(SubmissionError):
    """Malformed or missing input, detected before any network call."""

    kind = "validation"

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Could not build prediction payload: invalid {field}")


class TransportError(SubmissionError):
    """Network failure, timeout or a non-2xx response."""

    kind = "transport"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class DecodeError(SubmissionError):
    """Response body could not be mapped onto the expected result shape."""

    kind = "decode"


def error_kind(exc: BaseException) -> str:
    if isinstance(exc, SubmissionError):
        return exc.kind
    return "unexpected"
