"""Centralised defaults for promg."""
from __future__ import annotations

import os
import time
from pathlib import Path

DEFAULT_ENDPOINT = "http://localhost:9090"
DEFAULT_STEP = 60
DEFAULT_WINDOW_S = 24 * 3600
QUERY_RANGE_PATH = "/api/v1/query_range"

LIVE_HOST = "127.0.0.1"
LIVE_LOG_LEVEL = "warning"
# Open event streams never finish on their own; cap the drain on Ctrl-C.
LIVE_SHUTDOWN_TIMEOUT_S = 1

DEFAULT_LOG_DIR = Path.home() / ".cache" / "promg" / "logs"
LOG_FILE_NAME = "promg.log"


def log_dir() -> Path:
    """Log directory, read at call time so ``.env`` values apply."""
    return Path(os.getenv("PROMG_LOG_DIR") or DEFAULT_LOG_DIR)


# Evaluated once so repeated live-mode fetches keep the invocation window.
STARTED_AT = int(time.time())
DEFAULT_END = STARTED_AT
DEFAULT_START = STARTED_AT - DEFAULT_WINDOW_S
