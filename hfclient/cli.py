from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from hfclient.config import ClientConfig, load_config
from hfclient.core.contracts import EJECTION_FRACTION_DEFAULT
from hfclient.logger import setup_logging
from hfclient.session import PredictionSession, RetrainSession
from hfclient.submission_log import TERMINAL_EVENTS, latest_event, list_logs, read_events
from hfclient.ui.formatting import format_prediction, format_progress, format_retrain_result, format_timestamp

_TEXT_OPTIONS = ("age", "creatinine_phosphokinase", "platelets", "serum_creatinine", "serum_sodium", "time")
_FLAG_OPTIONS = ("sex", "anaemia", "diabetes", "high_blood_pressure", "smoking")


def _opt(name: str) -> str:
    return "--" + name.replace("_", "-")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hf-client",
        description="Submit heart-failure predictions or retraining datasets to the remote service.",
    )
    p.add_argument("--api-url", type=str, default=None, help="Override HF_CLIENT_API_URL.")
    p.add_argument("--log-level", type=str, default=None, help="Override HF_CLIENT_LOG_LEVEL.")
    sub = p.add_subparsers(dest="command", required=True)

    predict = sub.add_parser("predict", help="Predict death risk for one patient.")
    for name in _TEXT_OPTIONS:
        predict.add_argument(_opt(name), dest=name, type=str, default="")
    for name in _FLAG_OPTIONS:
        predict.add_argument(_opt(name), dest=name, type=int, choices=[0, 1], default=0)
    predict.add_argument(
        "--ejection-fraction",
        dest="ejection_fraction",
        type=int,
        default=EJECTION_FRACTION_DEFAULT,
        help="Percent; values outside 0..100 are clamped.",
    )

    retrain = sub.add_parser("retrain", help="Upload a CSV dataset and retrain the model.")
    retrain.add_argument("--file", dest="file", type=str, default=None, help="Path to the training CSV.")
    retrain.add_argument("--retrain-url", type=str, default=None, help="Override HF_CLIENT_RETRAIN_URL.")
    retrain.add_argument("--ramp-delay", type=float, default=None, help="Seconds between progress steps.")
    retrain.add_argument(
        "--no-attach",
        action="store_true",
        help="Send an empty body instead of the file contents.",
    )

    history = sub.add_parser("history", help="List recent submissions from the event log.")
    history.add_argument("--log-dir", type=str, default=None, help="Override HF_CLIENT_EVENT_LOG_DIR.")
    history.add_argument("--limit", type=int, default=10)
    return p


def _config_from_args(args: argparse.Namespace) -> ClientConfig:
    cfg = load_config()
    api = cfg.api
    if args.api_url:
        api = replace(api, base_url=args.api_url)
    if getattr(args, "retrain_url", None):
        api = replace(api, retrain_base_url=args.retrain_url)
    retrain = cfg.retrain
    if getattr(args, "ramp_delay", None) is not None:
        retrain = replace(retrain, step_delay_seconds=args.ramp_delay)
    if getattr(args, "no_attach", False):
        retrain = replace(retrain, attach_file=False)
    logging_cfg = cfg.logging
    if args.log_level:
        logging_cfg = replace(logging_cfg, level=args.log_level.upper())
    return replace(cfg, api=api, retrain=retrain, logging=logging_cfg)


def _run_predict(args: argparse.Namespace, config: ClientConfig) -> int:
    session = PredictionSession(config=config)
    for name in _TEXT_OPTIONS + _FLAG_OPTIONS:
        session.set_field(name, getattr(args, name))
    session.set_ejection_fraction(args.ejection_fraction)

    status = asyncio.run(session.predict())
    if status.state != "SUCCEEDED":
        print(status.error, file=sys.stderr)
        return 1
    print(format_prediction(status.result))
    return 0


def _run_retrain(args: argparse.Namespace, config: ClientConfig) -> int:
    session = RetrainSession(config=config)
    session.begin_pick()
    session.select_file(args.file)

    last = {"progress": -1}

    def _print_progress(job) -> None:
        if job.status == "uploading" and job.progress_percent != last["progress"]:
            last["progress"] = job.progress_percent
            print(format_progress(job.progress_percent), flush=True)

    session.subscribe(_print_progress)
    job = asyncio.run(session.retrain())
    if job.status != "succeeded":
        print(job.error, file=sys.stderr)
        return 1
    accuracy, loss = format_retrain_result(job.result)
    print(f"Model Accuracy: {accuracy}")
    print(f"Loss: {loss}")
    return 0


def _run_history(args: argparse.Namespace, config: ClientConfig) -> int:
    log_dir = args.log_dir or config.logging.event_log_dir
    if not log_dir:
        print("No event log directory configured (set HF_CLIENT_EVENT_LOG_DIR or pass --log-dir).", file=sys.stderr)
        return 1

    infos = list_logs(Path(log_dir))[: max(0, args.limit)]
    if not infos:
        print(f"No submissions logged in {log_dir}")
        return 0
    for info in infos:
        last = latest_event(read_events(info.path), *TERMINAL_EVENTS, "job_started")
        if last is None:
            outcome = "no events"
        elif last["type"] == "job_failed":
            outcome = f"failed ({last.get('error_kind')}): {last.get('error_detail')}"
        elif last["type"] == "job_succeeded":
            outcome = "succeeded"
        else:
            outcome = "running or interrupted"
        stamp = format_timestamp(last.get("ts_utc")) if last else None
        print(f"{info.session_id}  {info.action:<8} {outcome}  {stamp or ''}".rstrip())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = _config_from_args(args)
    setup_logging(config.logging.level)

    if args.command == "predict":
        return _run_predict(args, config)
    if args.command == "retrain":
        try:
            return _run_retrain(args, config)
        except OSError as exc:
            print(f"Could not read {args.file}: {exc}", file=sys.stderr)
            return 1
    if args.command == "history":
        return _run_history(args, config)
    raise ValueError(f"Unsupported command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
