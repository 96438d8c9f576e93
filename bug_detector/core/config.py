"""
Configuration
=============
Resolves where analysis requests go, using python-dotenv for local .env files.

Environment Variables:
    PUBLIC_API_BASE      — Primary base URL of the remote analysis service
    PUBLIC_BACKEND_URL   — Fallback base URL, used when PUBLIC_API_BASE is empty
    LOG_LEVEL            — Logging level name (default: INFO)
    LOG_DIR              — Directory for the daily log file (default: logs, empty disables)

Mode Selection:
    A non-empty base URL (after trimming whitespace and trailing slashes)
    selects CONNECTED mode; otherwise the service runs in DEMO mode and
    answers with local heuristics. The URL is not validated here, a bad
    value surfaces as a network error on the first analysis call.

Lifecycle:
    load_config() is called once at startup and its AppConfig is passed to
    the app and the analysis service. There is no hot reload.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

PRIMARY_API_BASE_VAR = "PUBLIC_API_BASE"
FALLBACK_API_BASE_VAR = "PUBLIC_BACKEND_URL"

MODE_DEMO = "demo"
MODE_CONNECTED = "connected"


@dataclass(frozen=True)
class AppConfig:
    """Immutable snapshot of the analysis routing configuration."""
    api_base: Optional[str]
    mode: str

    @property
    def is_demo(self) -> bool:
        return self.mode == MODE_DEMO

    def as_dict(self) -> dict:
        return {"apiBase": self.api_base, "mode": self.mode, "isDemo": self.is_demo}


def resolve_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Derive the routing configuration from environment values.

    Parameters
    ----------
    env : Mapping[str, str], optional
        Source of variables. Defaults to ``os.environ`` read at call time.

    Returns
    -------
    AppConfig
        ``connected`` with a normalized api_base, or ``demo`` with None.
    """
    if env is None:
        env = os.environ

    primary = (env.get(PRIMARY_API_BASE_VAR) or "").strip()
    fallback = (env.get(FALLBACK_API_BASE_VAR) or "").strip()

    chosen = primary or fallback or ""
    normalized = chosen.rstrip("/")

    if normalized:
        return AppConfig(api_base=normalized, mode=MODE_CONNECTED)
    return AppConfig(api_base=None, mode=MODE_DEMO)


def load_config() -> AppConfig:
    """Startup step: read .env (process variables take precedence) and resolve."""
    load_dotenv(override=False)
    return resolve_config()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_dir() -> Optional[str]:
    log_dir = os.getenv("LOG_DIR", "logs").strip()
    return log_dir or None
