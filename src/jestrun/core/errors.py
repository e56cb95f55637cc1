"""jestrun error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 7xxx: Test run
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_INVALID_PATTERN = 2003

    # Test run (7xxx)
    NO_BACKING_FILE = 7001
    NO_TEST_BLOCK = 7002
    NO_PRIOR_COMMAND = 7003
    PROCESS_START_FAILED = 7004


@dataclass(frozen=True, slots=True)
class JestRunError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'NO_TEST_BLOCK')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(JestRunError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def invalid_pattern(cls, tag: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_PATTERN,
            message=f"Invalid location pattern '{tag}': {reason}",
            details={"tag": tag, "reason": reason},
        )


class NotFoundError(JestRunError):
    """Nothing to run: no file behind the buffer or no test block at point."""

    @classmethod
    def no_backing_file(cls, path: str | None = None) -> "NotFoundError":
        if path:
            message = f"File does not exist: {path}"
        else:
            message = "Buffer is not visiting a file"
        return cls(
            code=ErrorCode.NO_BACKING_FILE,
            message=message,
            details={"path": path},
        )

    @classmethod
    def no_test_block(cls, path: str | None, keyword: str) -> "NotFoundError":
        return cls(
            code=ErrorCode.NO_TEST_BLOCK,
            message=f"No '{keyword}' block found above the cursor",
            details={"path": path, "keyword": keyword},
        )


class NoPriorCommandError(JestRunError):
    """Rerun requested before any command was run in this session."""

    @classmethod
    def empty(cls) -> "NoPriorCommandError":
        return cls(
            code=ErrorCode.NO_PRIOR_COMMAND,
            message="Nothing to rerun: no test command has been run yet",
        )


class RunError(JestRunError):
    """The external process could not be started."""

    @classmethod
    def start_failed(cls, command: str, cwd: str, reason: str) -> "RunError":
        return cls(
            code=ErrorCode.PROCESS_START_FAILED,
            message=f"Failed to start '{command}' in {cwd}: {reason}",
            details={"command": command, "working_directory": cwd, "reason": reason},
        )
