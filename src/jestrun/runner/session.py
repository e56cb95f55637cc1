"""Session storage for the last run command.

An editor integration keeps one ``MemorySessionStore`` per editing session.
The CLI starts a fresh process per invocation, so it uses
``FileSessionStore`` to carry the last command over to ``jestrun rerun``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import yaml
from pydantic import BaseModel, Field, ValidationError

from jestrun.core.logging import get_logger
from jestrun.runner.models import LastCommand

log = get_logger("session")

STATE_HEADER = """\
# AUTO-GENERATED - DO NOT EDIT MANUALLY
# Last command run by jestrun, replayed by `jestrun rerun`.

"""


class SessionStore(Protocol):
    """Holds the last command. Absent until the first run, never cleared."""

    def get(self) -> LastCommand | None: ...

    def set(self, last: LastCommand) -> None: ...


class MemorySessionStore:
    """In-process store living as long as the object does."""

    def __init__(self) -> None:
        self._last: LastCommand | None = None

    def get(self) -> LastCommand | None:
        return self._last

    def set(self, last: LastCommand) -> None:
        self._last = last


class SessionState(BaseModel):
    """On-disk shape of the session state file."""

    command: str = Field(description="Command line last run.")
    working_directory: str = Field(description="Directory it ran in.")


class FileSessionStore:
    """YAML-file backed store shared by successive CLI invocations."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def get(self) -> LastCommand | None:
        if not self.path.exists():
            return None
        try:
            with self.path.open() as f:
                data = yaml.safe_load(f) or {}
            state = SessionState(**data)
        except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
            # A corrupt state file means there is nothing usable to rerun
            log.warning("session.unreadable", path=str(self.path), error=str(e))
            return None
        return LastCommand(state.command, Path(state.working_directory))

    def set(self, last: LastCommand) -> None:
        state = SessionState(
            command=last.command,
            working_directory=str(last.working_directory),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = STATE_HEADER + yaml.dump(
            state.model_dump(), default_flow_style=False, sort_keys=False
        )
        self.path.write_text(content)
        log.debug("session.saved", path=str(self.path))
