# hfclient/config.py

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------
# Structured configuration
# ---------------------------

DEFAULT_API_URL = "https://heart-failure-prediction-ktzo.onrender.com"


@dataclass(frozen=True)
class ApiConfig:
    """Remote prediction/retraining service settings.

    Values can be overridden via environment variables:
    - HF_CLIENT_API_URL
    - HF_CLIENT_RETRAIN_URL (defaults to HF_CLIENT_API_URL)
    - HF_CLIENT_TIMEOUT (seconds)
    """

    base_url: str = field(default_factory=lambda: os.getenv("HF_CLIENT_API_URL", DEFAULT_API_URL))
    retrain_base_url: str | None = field(default_factory=lambda: os.getenv("HF_CLIENT_RETRAIN_URL") or None)
    predict_path: str = "/predict"
    retrain_path: str = "/retrain"
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv("HF_CLIENT_TIMEOUT", "30")))

    def predict_url(self) -> str:
        return self.base_url.rstrip("/") + self.predict_path

    def retrain_url(self) -> str:
        base = self.retrain_base_url or self.base_url
        return base.rstrip("/") + self.retrain_path


@dataclass(frozen=True)
class RetrainConfig:
    """Retraining submission settings.

    ``step_delay_seconds`` is the pause between simulated progress steps.
    ``attach_file`` controls whether the selected dataset is sent; when False
    the request body is an empty object.
    """

    progress_step: int = 10
    step_delay_seconds: float = field(default_factory=lambda: float(os.getenv("HF_CLIENT_RAMP_DELAY", "0.5")))
    attach_file: bool = field(default_factory=lambda: _env_bool("HF_CLIENT_ATTACH_FILE", True))


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings.

    ``event_log_dir`` enables the JSONL submission log when set.
    """

    level: str = field(default_factory=lambda: os.getenv("HF_CLIENT_LOG_LEVEL", "INFO").upper())
    event_log_dir: str | None = field(default_factory=lambda: os.getenv("HF_CLIENT_EVENT_LOG_DIR") or None)


@dataclass(frozen=True)
class ClientConfig:
    """Bundle of all client settings, handed to sessions and the CLI."""

    api: ApiConfig = field(default_factory=ApiConfig)
    retrain: RetrainConfig = field(default_factory=RetrainConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config() -> ClientConfig:
    """Build a fresh config from the current environment."""
    return ClientConfig()


# Instantiate structured configs
LOGGING = LoggingConfig()
