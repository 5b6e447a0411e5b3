"""HTTP client for the remote prediction/retraining service.

Thin wrapper around ``requests`` that turns every transport problem into a
``TransportError`` and every unreadable body into a ``DecodeError``. The
blocking calls are exposed as coroutines through ``asyncio.to_thread`` so the
job runner's event loop keeps ticking while a request is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from hfclient.config import ApiConfig
from hfclient.core.contracts import PredictionRequest, PredictionResult, RetrainResult
from hfclient.core.errors import DecodeError, TransportError

log = logging.getLogger(__name__)


class ApiClient:
    def __init__(self, config: ApiConfig | None = None, *, session: requests.Session | None = None) -> None:
        self.config = config or ApiConfig()
        self.session = session or requests.Session()

    def post_json(self, url: str, payload: Any) -> Any:
        """POST ``payload`` as JSON and return the decoded JSON body."""
        log.debug("POST %s", url)
        try:
            response = self.session.post(url, json=payload, timeout=self.config.timeout_seconds)
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"Request to {url} timed out after {self.config.timeout_seconds}s") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Could not reach {url}: {exc}") from exc

        # Only 2xx is success; unfollowed 3xx responses fail too.
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"{url} answered HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"{url} returned a non-JSON body") from exc

    def predict(self, request: PredictionRequest) -> PredictionResult:
        body = self.post_json(self.config.predict_url(), request.to_dict())
        return PredictionResult.from_dict(body)

    def retrain(self, payload: dict[str, Any]) -> RetrainResult:
        body = self.post_json(self.config.retrain_url(), payload)
        return RetrainResult.from_dict(body)

    async def predict_async(self, request: PredictionRequest) -> PredictionResult:
        return await asyncio.to_thread(self.predict, request)

    async def retrain_async(self, payload: dict[str, Any]) -> RetrainResult:
        return await asyncio.to_thread(self.retrain, payload)

    def close(self) -> None:
        self.session.close()
