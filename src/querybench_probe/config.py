from __future__ import annotations

import math
import os
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from querybench_probe.logging import get_logger

logger = get_logger("querybench.config")

DATABASE_URL_ENV = "DATABASE_URL"
ITERATIONS_ENV = "ITERATIONS"
WARMUP_ENV = "QUERYBENCH_WARMUP"
QUERY_ENV = "QUERYBENCH_QUERY"
CONNECT_TIMEOUT_ENV = "QUERYBENCH_CONNECT_TIMEOUT_SECONDS"

DEFAULT_ITERATIONS = 100
DEFAULT_WARMUP = 0
DEFAULT_QUERY = "select 1"
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


class ConfigError(ValueError):
    pass


class BenchmarkConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    database_url: str = Field(min_length=1)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=0)
    warmup: int = Field(default=DEFAULT_WARMUP, ge=0)
    query: str = Field(default=DEFAULT_QUERY, min_length=1)
    connect_timeout_seconds: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT_SECONDS, gt=0
    )


def _env_non_negative_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    if _DECIMAL_INT.fullmatch(raw) is None:
        logger.warning(
            "invalid integer in environment; using default",
            env=name,
            value=raw,
            default=default,
        )
        return default
    value = int(raw)
    if value < 0:
        logger.warning(
            "negative value in environment; using default",
            env=name,
            value=raw,
            default=default,
        )
        return default
    return value


def _env_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value <= 0:
        logger.warning(
            "invalid positive number in environment; using default",
            env=name,
            value=raw,
            default=default,
        )
        return default
    return value


def iterations_from_env() -> int:
    return _env_non_negative_int(ITERATIONS_ENV, DEFAULT_ITERATIONS)


def load_config(**overrides: Any) -> BenchmarkConfig:
    """Build the benchmark config from the environment.

    Keyword overrides (typically CLI flags) win over the environment; a
    ``None`` override is ignored.
    """
    payload: dict[str, Any] = {
        "database_url": os.getenv(DATABASE_URL_ENV, "").strip(),
        "iterations": iterations_from_env(),
        "warmup": _env_non_negative_int(WARMUP_ENV, DEFAULT_WARMUP),
        "query": os.getenv(QUERY_ENV, "").strip() or DEFAULT_QUERY,
        "connect_timeout_seconds": _env_positive_float(
            CONNECT_TIMEOUT_ENV, DEFAULT_CONNECT_TIMEOUT_SECONDS
        ),
    }
    payload.update({key: value for key, value in overrides.items() if value is not None})
    if not payload["database_url"]:
        raise ConfigError(f"{DATABASE_URL_ENV} or --database-url is required")
    try:
        return BenchmarkConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
