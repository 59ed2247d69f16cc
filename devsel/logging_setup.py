from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug"}


def resolve_level(level: str | int) -> int:
    """Turn a level name such as ``"debug"`` or ``"WARN"`` into a ``logging`` constant.

    Unknown names resolve to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        return logging.INFO
    return resolved


def uvicorn_log_level(level: str | int) -> str:
    name = logging.getLevelName(resolve_level(level))
    if not isinstance(name, str) or name.lower() not in _UVICORN_LEVELS:
        return "info"
    return name.lower()


def setup_logging(level: str | int = logging.INFO, stream: TextIO | None = None) -> None:
    """Route devsel log records to a console stream.

    Records go to stdout unless another ``stream`` is given.
    The formatter's skipped-device trace is only visible at DEBUG.
    """
    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(stream or sys.stdout)],
        force=True,
    )
