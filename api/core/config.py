"""
Environment-driven settings.

Every getter reads the environment at call time and falls back to its default
when the variable is missing, blank, or unparsable.
"""

from __future__ import annotations

import math
import os

DEFAULT_RADIUS_MILES = 10.0


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def db_pool_min_size() -> int:
    return max(env_int("DB_POOL_MIN_SIZE", 1), 0)


def db_pool_max_size() -> int:
    return max(env_int("DB_POOL_MAX_SIZE", 5), 1)


def db_command_timeout_s() -> float:
    return env_float("DB_COMMAND_TIMEOUT_S", 30.0)


def default_radius_miles() -> float:
    return env_float("DEFAULT_RADIUS_MILES", DEFAULT_RADIUS_MILES)


def strict_near_param() -> bool:
    # false restores the old behaviour: a bad `near` just disables proximity.
    return env_bool("STRICT_NEAR_PARAM", True)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()
