"""Config module exports."""

from jestrun.config.loader import load_config
from jestrun.config.models import (
    JestRunConfig,
    LoggingConfig,
    RunnerConfig,
    SessionConfig,
)

__all__ = [
    "load_config",
    "JestRunConfig",
    "LoggingConfig",
    "RunnerConfig",
    "SessionConfig",
]
