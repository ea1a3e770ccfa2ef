"""Environment driven settings for IntelliForm."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}

STRICT_ROTATION_ENV = "INTELLIFORM_STRICT_ROTATION"
MAX_REFERENCE_HOPS_ENV = "INTELLIFORM_MAX_REFERENCE_HOPS"
LOG_LEVEL_ENV = "INTELLIFORM_LOG_LEVEL"

DEFAULT_MAX_REFERENCE_HOPS = 8


@dataclass(frozen=True, slots=True)
class FormSettings:
    """Runtime knobs consumed by the graph, parser and loggers."""

    strict_rotation: bool = False
    max_reference_hops: int = DEFAULT_MAX_REFERENCE_HOPS
    log_level: int = logging.WARNING


def _env_flag(name: str) -> bool:
    value = os.getenv(name)
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_log_level(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def load_settings() -> FormSettings:
    """Build :class:`FormSettings` from the current environment."""

    return FormSettings(
        strict_rotation=_env_flag(STRICT_ROTATION_ENV),
        max_reference_hops=_env_int(MAX_REFERENCE_HOPS_ENV, DEFAULT_MAX_REFERENCE_HOPS),
        log_level=_env_log_level(LOG_LEVEL_ENV, logging.WARNING),
    )


__all__ = [
    "FormSettings",
    "load_settings",
    "STRICT_ROTATION_ENV",
    "MAX_REFERENCE_HOPS_ENV",
    "LOG_LEVEL_ENV",
    "DEFAULT_MAX_REFERENCE_HOPS",
]
