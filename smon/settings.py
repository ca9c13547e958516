from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    # An empty value counts as unset.
    return os.getenv(name) or default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Roster
    config_path: str = _env_str("CONFIG_PATH", "/app/config/config.toml")
    poll_interval_s: float = _env_float("SMON_POLL_INTERVAL_S", 3.0)

    # Synthetic traffic
    error_probability: float = _env_float("SMON_ERROR_PROBABILITY", 0.1)
    max_work_s: float = _env_float("SMON_MAX_WORK_S", 0.5)
    load_interval_s: float = _env_float("SMON_LOAD_INTERVAL_S", 5.0)
    # When false the load simulator overwrites the active-request gauge.
    split_load_gauge: bool = _env_bool("SMON_SPLIT_LOAD_GAUGE", True)

    # HTTP
    host: str = _env_str("SMON_HOST", "0.0.0.0")
    port: int = _env_int("SMON_PORT", 8080)
    log_level: str = _env_str("SMON_LOG_LEVEL", "INFO")


settings = Settings()
