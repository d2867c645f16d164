"""Comparison defaults and their environment overrides."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from tokendiff.adapters.baseline import DEFAULT_MAX_CHUNK_SIZE
from tokendiff.domain.reconciliation import InvalidVersionError, parse_version

from .env import optional_bool_env, optional_env, optional_int_env
from .errors import ConfigurationError

DEFAULT_BASE_VERSION: Final[str] = "1.0.0"
BASELINE_STORE_KEY: Final[str] = "baseline"


@dataclass(frozen=True, slots=True)
class CompareConfig:
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    base_version: str = DEFAULT_BASE_VERSION
    fail_on_breaking: bool = False
    store_key: str = BASELINE_STORE_KEY


def get_compare_config() -> CompareConfig:
    base_version = optional_env("TOKENDIFF_BASE_VERSION") or DEFAULT_BASE_VERSION
    try:
        parse_version(base_version)
    except InvalidVersionError as exc:
        raise ConfigurationError(f"TOKENDIFF_BASE_VERSION is invalid: {exc}") from exc

    return CompareConfig(
        max_chunk_size=optional_int_env(
            "TOKENDIFF_MAX_CHUNK_SIZE",
            default=DEFAULT_MAX_CHUNK_SIZE,
            minimum=1,
        ),
        base_version=base_version,
        fail_on_breaking=optional_bool_env("TOKENDIFF_FAIL_ON_BREAKING", default=False),
        store_key=optional_env("TOKENDIFF_STORE_KEY") or BASELINE_STORE_KEY,
    )
