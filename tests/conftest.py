"""Pytest configuration and shared fixtures.

Puts the project root on ``sys.path`` so ``import hfclient`` and
``import api`` work when tests run from any directory, and provides a fake
HTTP session so no test touches the network.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any
from unittest.mock import Mock

import pytest
import requests

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from hfclient.api_client import ApiClient  # noqa: E402
from hfclient.config import ApiConfig, ClientConfig, LoggingConfig, RetrainConfig  # noqa: E402

BASE_URL = "http://stub.test"

# Scenario record from the heart-failure dataset (row 1 of the UCI data).
SCENARIO_FIELDS: dict[str, Any] = {
    "age": "60",
    "sex": 1,
    "anaemia": 1,
    "creatinine_phosphokinase": "582",
    "diabetes": 0,
    "ejection_fraction": 38,
    "high_blood_pressure": 1,
    "platelets": "265000",
    "serum_creatinine": "1.9",
    "serum_sodium": "130",
    "smoking": 0,
    "time": "4",
}


def make_response(status_code: int = 200, body: Any = None, *, text: str | None = None) -> requests.Response:
    """Build a real ``requests.Response`` without a network round-trip."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = BASE_URL
    payload = text if text is not None else json.dumps(body)
    resp._content = payload.encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    return resp


@pytest.fixture
def fake_http() -> Mock:
    """A stand-in for ``requests.Session``; set ``fake_http.post.return_value``/``side_effect``."""
    session = Mock(spec=requests.Session)
    session.post.return_value = make_response(200, {})
    return session


@pytest.fixture
def client_config(tmp_path) -> ClientConfig:
    return ClientConfig(
        api=ApiConfig(base_url=BASE_URL, retrain_base_url=None, timeout_seconds=5.0),
        retrain=RetrainConfig(progress_step=10, step_delay_seconds=0.0, attach_file=True),
        logging=LoggingConfig(level="DEBUG", event_log_dir=str(tmp_path / "events")),
    )


@pytest.fixture
def api_client(fake_http: Mock, client_config: ClientConfig) -> ApiClient:
    return ApiClient(client_config.api, session=fake_http)


@pytest.fixture
def scenario_fields() -> dict[str, Any]:
    return dict(SCENARIO_FIELDS)


@pytest.fixture
def training_csv_bytes() -> bytes:
    header = (
        "age,anaemia,creatinine_phosphokinase,diabetes,ejection_fraction,high_blood_pressure,"
        "platelets,serum_creatinine,serum_sodium,sex,smoking,time,DEATH_EVENT\n"
    )
    rows = (
        "75,0,582,0,20,1,265000,1.9,130,1,0,4,1\n"
        "55,0,7861,0,38,0,263358.03,1.1,136,1,0,6,1\n"
        "65,0,146,0,20,0,162000,1.3,129,1,1,7,1\n"
        "50,1,111,0,20,0,210000,1.9,137,1,0,7,0\n"
    )
    return (header + rows).encode("utf-8")


@pytest.fixture
def response_factory():
    return make_response
