"""Application configuration helpers."""

from __future__ import annotations

from .compare import (
    BASELINE_STORE_KEY,
    DEFAULT_BASE_VERSION,
    CompareConfig,
    get_compare_config,
)
from .env import optional_bool_env, optional_env, optional_int_env
from .errors import ConfigurationError
from .logging import configure_logging

__all__ = [
    "BASELINE_STORE_KEY",
    "DEFAULT_BASE_VERSION",
    "CompareConfig",
    "ConfigurationError",
    "configure_logging",
    "get_compare_config",
    "optional_bool_env",
    "optional_env",
    "optional_int_env",
]
