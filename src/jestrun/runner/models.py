"""Runner core models.

Data structures shared by command building, process execution and
output navigation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

# =============================================================================
# Source Locations
# =============================================================================


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """A navigable (file, line, column) reference found in runner output."""

    file: str
    line: int  # 1-based
    column: int  # 1-based

    def resolve(self, base_dir: Path) -> Path:
        """Absolute path of ``file``, relative paths taken from *base_dir*."""
        path = Path(self.file)
        if path.is_absolute():
            return path
        return base_dir / path

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class LocationPattern:
    """A registered line pattern and the groups holding file/line/column."""

    tag: str
    regex: re.Pattern[str]
    file_group: int
    line_group: int
    col_group: int


# =============================================================================
# Commands and Runs
# =============================================================================


@dataclass(frozen=True, slots=True)
class LastCommand:
    """The most recently run command line and where it ran."""

    command: str
    working_directory: Path


class RunState(StrEnum):
    """Lifecycle of a single test process invocation."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
