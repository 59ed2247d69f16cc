from __future__ import annotations

import os
from dataclasses import dataclass


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8686
    default_backend: str = "sycl"
    log_level: str = "INFO"


def load_settings() -> Settings:
    log_level = os.getenv("DEVSEL_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if _as_bool(os.getenv("DEVSEL_DEBUG"), False):
        log_level = "DEBUG"
    return Settings(
        host=os.getenv("DEVSEL_HOST", "127.0.0.1"),
        port=int(os.getenv("DEVSEL_PORT", "8686")),
        default_backend=os.getenv("DEVSEL_DEFAULT_BACKEND", "sycl").strip().lower() or "sycl",
        log_level=log_level,
    )
