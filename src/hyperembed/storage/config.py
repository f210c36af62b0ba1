"""Engine configuration for hyperembed."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEFAULT_BATCH_SIZE = 256
DEFAULT_MAX_WORKERS = 1
DEFAULT_TOLERANCE = 1e-5
DEFAULT_LOG_LEVEL = "WARNING"


def _read_env(name: str, cast, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def get_default_batch_size() -> int:
    """Get the default provider batch size.

    Uses HYPEREMBED_BATCH_SIZE env var if set, otherwise 256.
    """
    return _read_env("HYPEREMBED_BATCH_SIZE", int, DEFAULT_BATCH_SIZE)


def get_default_max_workers() -> int:
    """Get the default number of batch worker threads.

    Uses HYPEREMBED_MAX_WORKERS env var if set, otherwise 1 (serial).
    """
    return _read_env("HYPEREMBED_MAX_WORKERS", int, DEFAULT_MAX_WORKERS)


def get_default_tolerance() -> float:
    """Get the default hyperboloid constraint tolerance.

    Uses HYPEREMBED_TOLERANCE env var if set, otherwise 1e-5.
    """
    return _read_env("HYPEREMBED_TOLERANCE", float, DEFAULT_TOLERANCE)


def get_default_log_level() -> str:
    """Get the default log level name from HYPEREMBED_LOG_LEVEL."""
    level = _read_env("HYPEREMBED_LOG_LEVEL", str, DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid value for HYPEREMBED_LOG_LEVEL: {level!r}")
    return level


@dataclass
class EngineConfig:
    """Configuration for the projection engine and embedding provider."""

    batch_size: int = field(default_factory=get_default_batch_size)
    max_workers: int = field(default_factory=get_default_max_workers)
    tolerance: float = field(default_factory=get_default_tolerance)
    log_level: str = field(default_factory=get_default_log_level)

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")

    @classmethod
    def default(cls, **overrides) -> EngineConfig:
        """Create a configuration from the environment with optional overrides."""
        return cls(**overrides)

    @property
    def parallel(self) -> bool:
        """True when batch projection fans out to worker threads."""
        return self.max_workers > 1
