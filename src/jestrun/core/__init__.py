"""Core module exports."""

from jestrun.core.errors import (
    ConfigError,
    ErrorCode,
    JestRunError,
    NoPriorCommandError,
    NotFoundError,
    RunError,
)
from jestrun.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from jestrun.core.progress import status

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "JestRunError",
    "NoPriorCommandError",
    "NotFoundError",
    "RunError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "status",
]
