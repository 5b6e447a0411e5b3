"""JSONL log of predict/retrain job events.

One file per (action, session). Every lifecycle event of a job becomes one
JSON line, so the error kind and detail survive on disk even though the
user only sees the collapsed failure message. Readers skip lines they cannot
parse; a crash in the middle of an append loses at most that one event.

No Streamlit imports here; the CLI and the UI share it.
"""

from __future__ import annotations

import json
import os
import re
from collections import deque
from dataclasses import asdict, dataclass, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

LOG_PREFIX = "submissions"
LOG_SUFFIX = ".jsonl"
TERMINAL_EVENTS = ("job_succeeded", "job_failed")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_session_id(ts: datetime | None = None) -> str:
    """Sortable UTC id such as ``20261017T101010123456Z``."""
    return (ts or datetime.now(timezone.utc)).strftime("%Y%m%dT%H%M%S%fZ")


def _slug(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]", "_", str(value))


def make_log_path(*, action: str, session_id: str, log_dir: Path) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{LOG_PREFIX}_{_slug(action)}_{_slug(session_id)}{LOG_SUFFIX}"


def to_jsonable(value: Any) -> Any:
    """Convert an event payload to plain JSON types.

    Dataclasses become dicts, naive datetimes are read as UTC, and anything
    else that JSON cannot hold is stored as ``str(value)``.
    """
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, datetime):
        aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return aware.astimezone(timezone.utc).isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def append_event(path: Path, event: dict[str, Any]) -> None:
    """Append ``event`` as a single fsync'ed line; ``ts_utc`` is filled in when absent."""
    record = {"ts_utc": utc_now_iso(), **event}
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8", newline="\n") as fh:
        fh.write(json.dumps(to_jsonable(record), ensure_ascii=False) + "\n")
        fh.flush()
        try:
            os.fsync(fh.fileno())
        except OSError:
            pass  # not every filesystem supports fsync


def _iter_events(path: Path) -> Iterator[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                yield obj


def read_events(path: Path, *, max_events: int | None = None) -> list[dict[str, Any]]:
    """Events in file order; with ``max_events`` only the newest ones are kept."""
    if not path.exists():
        return []
    return list(deque(_iter_events(path), maxlen=max_events))


def latest_event(events: Iterable[dict[str, Any]], *event_types: str) -> dict[str, Any] | None:
    """Most recent event whose ``type`` is one of ``event_types``."""
    found = None
    for event in events:
        if event.get("type") in event_types:
            found = event
    return found


@dataclass(frozen=True)
class SubmissionLogInfo:
    path: Path
    action: str
    session_id: str


def list_logs(log_dir: Path) -> list[SubmissionLogInfo]:
    """Submission logs under ``log_dir``, newest first."""
    if not log_dir.is_dir():
        return []

    infos: list[SubmissionLogInfo] = []
    for p in log_dir.glob(f"{LOG_PREFIX}_*{LOG_SUFFIX}"):
        _, _, rest = p.stem.partition("_")
        action, sep, session_id = rest.partition("_")
        if not sep:
            continue
        infos.append(SubmissionLogInfo(path=p, action=action, session_id=session_id))
    return sorted(infos, key=lambda info: info.path.stat().st_mtime, reverse=True)
