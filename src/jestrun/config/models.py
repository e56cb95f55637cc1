"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (JESTRUN__SECTION__KEY)
3. Project YAML (<project root>/.jestrun.yaml)
4. Global YAML (~/.config/jestrun/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    JESTRUN__<SECTION>__<KEY>=<VALUE>

Examples:
    JESTRUN__LOGGING__LEVEL=DEBUG
    JESTRUN__RUNNER__COMMAND="yarn jest"
    JESTRUN__RUNNER__OPTIONS='["--color", "--runInBand"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        JESTRUN__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Test output is never routed through logging.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RunnerConfig(BaseModel):
    """How test commands are built.

    Env vars:
        JESTRUN__RUNNER__COMMAND: Runner binary (default: npx jest)
        JESTRUN__RUNNER__OPTIONS: JSON list of extra flags (default: ["--color"])
        JESTRUN__RUNNER__MANIFEST: File that marks a project root
        JESTRUN__RUNNER__BLOCK_KEYWORD: Keyword anchoring run-at-point
        JESTRUN__RUNNER__ROOT_SEARCH_STEP: Directory levels climbed per step
    """

    command: str = Field(
        default="npx jest",
        description="Runner binary and any fixed leading arguments. Not escaped.",
    )
    options: list[str] = Field(
        default_factory=lambda: ["--color"],
        description="Extra command-line flags, each shell-escaped, in order.",
    )
    manifest: str = Field(
        default="package.json",
        description="File whose presence marks the project root.",
    )
    block_keyword: str = Field(
        default="describe",
        description="Keyword of the test block whose label run-at-point filters on.",
    )
    root_search_step: Literal[1, 2] = Field(
        default=2,
        description="Directory levels climbed per step when looking for the manifest. "
        "2 reproduces the historical behavior; 1 visits every ancestor.",
    )
    pattern: str = Field(
        default="jest",
        description="Tag of the registered location pattern used to scan output.",
    )

    @field_validator("command", "manifest", "block_keyword")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class SessionConfig(BaseModel):
    """Where the CLI keeps the last command between invocations.

    Env vars:
        JESTRUN__SESSION__STATE_PATH: State file path
    """

    state_path: str = Field(
        default="~/.cache/jestrun/state.yaml",
        description="YAML file holding the last command for `jestrun rerun`.",
    )

    @property
    def resolved_state_path(self) -> Path:
        return Path(self.state_path).expanduser()


class JestRunConfig(BaseModel):
    """Root configuration for jestrun."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
