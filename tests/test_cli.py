from __future__ import annotations

import pytest
import requests

from hfclient import cli


@pytest.fixture
def patched_post(monkeypatch, response_factory):
    calls = []
    responses = {}

    def _fake_post(self, url, json=None, timeout=None):
        calls.append({"url": url, "json": json, "timeout": timeout})
        return responses.get("next", response_factory(200, {}))

    monkeypatch.setattr(requests.Session, "post", _fake_post)
    monkeypatch.setenv("HF_CLIENT_EVENT_LOG_DIR", "")
    return calls, responses


SCENARIO_ARGS = [
    "--age", "60", "--sex", "1", "--anaemia", "1", "--creatinine-phosphokinase", "582",
    "--diabetes", "0", "--ejection-fraction", "38", "--high-blood-pressure", "1",
    "--platelets", "265000", "--serum-creatinine", "1.9", "--serum-sodium", "130",
    "--smoking", "0", "--time", "4",
]


def test_predict_prints_result(patched_post, response_factory, capsys):
    calls, responses = patched_post
    responses["next"] = response_factory(200, {"death_probability": 0.57, "death_risk": "High"})

    code = cli.main(["--api-url", "http://cli.test", "predict", *SCENARIO_ARGS])

    assert code == 0
    assert calls[0]["url"] == "http://cli.test/predict"
    assert calls[0]["json"]["platelets"] == 265000.0
    assert "Death Probability: 0.57" in capsys.readouterr().out


def test_predict_with_missing_field_exits_1_without_network(patched_post, capsys):
    calls, _ = patched_post

    code = cli.main(["predict", "--age", "60"])

    assert code == 1
    assert calls == []
    assert "Failed to get prediction" in capsys.readouterr().err


def test_ejection_fraction_is_clamped(patched_post, response_factory):
    calls, responses = patched_post
    responses["next"] = response_factory(200, {"death_probability": 0.1, "death_risk": "Low"})
    args = [a if a != "38" else "150" for a in SCENARIO_ARGS]

    cli.main(["predict", *args])

    assert calls[0]["json"]["ejection_fraction"] == 100


def test_retrain_prints_progress_and_metrics(patched_post, response_factory, tmp_path, training_csv_bytes, capsys):
    calls, responses = patched_post
    responses["next"] = response_factory(200, {"accuracy": 0.87, "loss": 0.231})
    data = tmp_path / "heart.csv"
    data.write_bytes(training_csv_bytes)

    code = cli.main(["--api-url", "http://cli.test", "retrain", "--file", str(data), "--ramp-delay", "0"])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[:11] == [f"Progress: {p}%" for p in range(0, 101, 10)]
    assert out[-2:] == ["Model Accuracy: 87.00%", "Loss: 0.2310"]
    assert calls[0]["url"] == "http://cli.test/retrain"
    assert len(calls[0]["json"]["records"]) == 4


def test_retrain_without_file_fails_locally(patched_post, capsys):
    calls, _ = patched_post

    code = cli.main(["retrain", "--ramp-delay", "0"])

    assert code == 1
    assert calls == []
    assert "Failed to retrain model" in capsys.readouterr().err


def test_retrain_with_unreadable_path_reports_it(patched_post, tmp_path, capsys):
    code = cli.main(["retrain", "--file", str(tmp_path / "missing.csv"), "--ramp-delay", "0"])

    assert code == 1
    assert "Could not read" in capsys.readouterr().err


def test_no_attach_sends_empty_body(patched_post, response_factory, tmp_path, training_csv_bytes):
    calls, responses = patched_post
    responses["next"] = response_factory(200, {"accuracy": 0.5, "loss": 0.69})
    data = tmp_path / "heart.csv"
    data.write_bytes(training_csv_bytes)

    cli.main(["retrain", "--file", str(data), "--ramp-delay", "0", "--no-attach"])

    assert calls[0]["json"] == {}


def test_history_lists_logged_submissions(patched_post, response_factory, tmp_path, monkeypatch, capsys):
    _, responses = patched_post
    log_dir = tmp_path / "events"
    monkeypatch.setenv("HF_CLIENT_EVENT_LOG_DIR", str(log_dir))
    responses["next"] = response_factory(500, {})

    assert cli.main(["predict", *SCENARIO_ARGS]) == 1
    capsys.readouterr()

    code = cli.main(["history"])

    out = capsys.readouterr().out
    assert code == 0
    assert "predict" in out
    assert "failed (transport)" in out


def test_history_without_log_dir_fails(patched_post, capsys):
    assert cli.main(["history"]) == 1
    assert "No event log directory" in capsys.readouterr().err


def test_history_with_empty_dir(patched_post, tmp_path, capsys):
    assert cli.main(["history", "--log-dir", str(tmp_path)]) == 0
    assert "No submissions logged" in capsys.readouterr().out
