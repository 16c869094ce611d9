# src/jobdesk/config.py
"""
Runtime settings, read from the environment (and a .env file if present).

- JOBDESK_API_BASE_URL: where the jobs API lives (default http://localhost:5000)
- JOBDESK_API_TIMEOUT:  per-request timeout in seconds for the HTTP transport
- JOBDESK_LOG_LEVEL:    logging level name for the CLI
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 20.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_BASE_URL
    api_timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(base_url: Optional[str] = None, *, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from env vars; `base_url` (e.g. from --base-url) wins over the env.
    Raises SystemExit if the timeout is not a number.
    """
    if use_dotenv:
        load_dotenv()  # looks for a .env file in the working directory

    raw_timeout = os.getenv("JOBDESK_API_TIMEOUT", "")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise SystemExit(f"JOBDESK_API_TIMEOUT must be a number of seconds, got {raw_timeout!r}.")

    return Settings(
        api_base_url=(base_url or os.getenv("JOBDESK_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        api_timeout=timeout,
        log_level=(os.getenv("JOBDESK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
