"""
Runtime configuration, read from the environment (and a .env file if present).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlencode

from dotenv import load_dotenv

from .proximity import DEFAULT_THRESHOLD
from .upstream import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

# ─── Defaults ────────────────────────────────────────────────────────

DEFAULT_COURTS_CSV = "1,2,3,4,5,6,7,8,9,10,11,12,13,14,15,16,17,21,22"
DEFAULT_UPSTREAM_BASE_URL = "https://cdb.sci.gov.in/index.php"
DEFAULT_CACHE_TTL_SECONDS = 8.0
DEFAULT_POLL_INTERVAL_SECONDS = 10.0
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    courts_csv: str = DEFAULT_COURTS_CSV
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    alert_threshold: int = DEFAULT_THRESHOLD
    upstream_base_url: str = DEFAULT_UPSTREAM_BASE_URL
    upstream_timeout_seconds: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    tracked_matters: str = ""
    log_level: str = "INFO"

    @property
    def upstream_url(self) -> str:
        query = urlencode(
            {
                "courtListCsv": self.courts_csv,
                "request": "display_full",
                "requestType": "ajax",
            },
            safe=",",
        )
        return f"{self.upstream_base_url}?{query}"


def _env_number(name: str, default: float, cast: type = float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from environment variables.

    Args:
        dotenv: Load a .env file from the working directory first.
    """
    if dotenv:
        load_dotenv()

    return Settings(
        port=int(_env_number("PORT", 3000, int)),
        courts_csv=os.environ.get("COURTS_CSV") or DEFAULT_COURTS_CSV,
        cache_ttl_seconds=_env_number("CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
        poll_interval_seconds=_env_number(
            "POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
        ),
        alert_threshold=max(1, int(_env_number("ALERT_THRESHOLD", DEFAULT_THRESHOLD, int))),
        upstream_base_url=os.environ.get("UPSTREAM_BASE_URL") or DEFAULT_UPSTREAM_BASE_URL,
        upstream_timeout_seconds=_env_number("UPSTREAM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT),
        user_agent=os.environ.get("UPSTREAM_USER_AGENT") or DEFAULT_USER_AGENT,
        tracked_matters=os.environ.get("TRACKED_MATTERS", ""),
        log_level=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
    )
