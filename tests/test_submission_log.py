from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from hfclient.submission_log import (
    append_event,
    to_jsonable,
    latest_event,
    list_logs,
    make_log_path,
    read_events,
)


def test_append_and_read_events_round_trip(tmp_path: Path) -> None:
    log_path = make_log_path(action="predict", session_id="test", log_dir=tmp_path)

    append_event(log_path, {"type": "job_started", "action": "predict"})
    append_event(log_path, {"type": "job_failed", "action": "predict", "error_kind": "transport"})

    events = read_events(log_path)
    assert len(events) == 2
    assert events[0]["type"] == "job_started"
    assert events[1]["error_kind"] == "transport"
    assert "ts_utc" in events[0]


def test_read_events_ignores_partial_last_line(tmp_path: Path) -> None:
    log_path = make_log_path(action="retrain", session_id="partial", log_dir=tmp_path)

    append_event(log_path, {"type": "job_started"})

    # Simulate a crash during append (partial JSON line at EOF).
    with log_path.open("a", encoding="utf-8") as f:
        f.write('{"type": "job_progress"')

    events = read_events(log_path)
    assert len(events) == 1
    assert events[0]["type"] == "job_started"


def test_read_events_keeps_most_recent_when_capped(tmp_path: Path) -> None:
    log_path = tmp_path / "x.jsonl"
    for i in range(5):
        append_event(log_path, {"type": "job_progress", "progress": i * 10})

    events = read_events(log_path, max_events=2)
    assert [e["progress"] for e in events] == [30, 40]
    assert read_events(tmp_path / "missing.jsonl") == []


def test_list_logs_parses_action_and_session(tmp_path: Path) -> None:
    append_event(make_log_path(action="predict", session_id="20261017T101010Z", log_dir=tmp_path), {"type": "a"})
    append_event(make_log_path(action="retrain", session_id="s_1", log_dir=tmp_path), {"type": "b"})
    (tmp_path / "unrelated.txt").write_text("x", encoding="utf-8")

    infos = {info.action: info.session_id for info in list_logs(tmp_path)}
    assert infos == {"predict": "20261017T101010Z", "retrain": "s_1"}
    assert list_logs(tmp_path / "nope") == []


def test_to_jsonable_and_latest_event() -> None:
    @dataclass
    class _Result:
        accuracy: float
        where: Path

    out = to_jsonable({"r": _Result(0.9, Path("a/b")), "t": datetime(2026, 10, 17, 12, 0, 0), "s": {1}})
    assert out["r"] == {"accuracy": 0.9, "where": str(Path("a/b"))}
    assert out["t"] == "2026-10-17T12:00:00+00:00"
    assert out["s"] == "{1}"

    events = [{"type": "job_progress", "progress": 10}, {"type": "job_failed"}, {"type": "job_progress", "progress": 20}]
    assert latest_event(events, "job_progress")["progress"] == 20
    assert latest_event(events, "job_succeeded") is None
