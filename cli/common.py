from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console

from promg import settings

_CONSOLE = Console(stderr=True, soft_wrap=True)


def console() -> Console:
    """Rich console bound to stderr; stdout carries chart output only."""
    return _CONSOLE


def ensure_dir(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(level: str = "WARNING", log_dir: Path | None = None) -> None:
    stream_level = getattr(logging, level.upper(), logging.WARNING)
    target = ensure_dir((log_dir or settings.log_dir()) / settings.LOG_FILE_NAME)
    file_handler = RotatingFileHandler(
        target,
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(stream_level)
    logging.basicConfig(
        level=min(stream_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[file_handler, stream_handler],
        force=True,
    )
