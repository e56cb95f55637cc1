"""Test process execution and output navigation.

A ``ResultNavigator`` starts test commands as external shell processes,
streams their output into a results sink, remembers the last command for
rerun, and turns stack-trace lines in the output into ``SourceLocation``s.

Output is scanned no matter how the process exits: failing tests are what
produce the navigable stack lines.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import re
import signal
import sys
from pathlib import Path
from typing import Protocol

from jestrun.core.errors import ConfigError, NoPriorCommandError, RunError
from jestrun.core.logging import clear_run_id, get_logger, get_run_id, set_run_id
from jestrun.runner.models import LastCommand, LocationPattern, RunState, SourceLocation
from jestrun.runner.session import MemorySessionStore, SessionStore

log = get_logger("navigator")

# Jest stack frame: "at addSpecsToSuite (node_modules/.../Env.js:522:17)"
JEST_LOCATION_REGEX = r"at \S+ \((.+?):(\d+):(\d+)"

# SGR and other CSI sequences emitted by --color
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

# Seconds a cancelled process gets between SIGTERM and SIGKILL
CANCEL_GRACE_SEC = 5.0

# Bytes read from the process per chunk; lines may span any number of chunks
_READ_CHUNK = 64 * 1024

_POSIX = sys.platform != "win32"


# =============================================================================
# Location Patterns
# =============================================================================


class PatternRegistry:
    """Registry of output line patterns, keyed by tag."""

    def __init__(self) -> None:
        self._patterns: dict[str, LocationPattern] = {}

    def register(
        self,
        tag: str,
        regex: str | re.Pattern[str],
        file_group: int = 1,
        line_group: int = 2,
        col_group: int = 3,
    ) -> LocationPattern:
        """Register (or replace) the pattern for *tag*."""
        try:
            compiled = re.compile(regex) if isinstance(regex, str) else regex
        except re.error as e:
            raise ConfigError.invalid_pattern(tag, str(e)) from e

        groups = (file_group, line_group, col_group)
        if min(groups) < 1 or max(groups) > compiled.groups:
            raise ConfigError.invalid_pattern(
                tag,
                f"groups {groups} not all within the {compiled.groups} groups of the regex",
            )

        pattern = LocationPattern(tag, compiled, file_group, line_group, col_group)
        self._patterns[tag] = pattern
        return pattern

    def get(self, tag: str) -> LocationPattern | None:
        """Get a pattern by tag."""
        return self._patterns.get(tag)

    def require(self, tag: str) -> LocationPattern:
        """Get a pattern by tag, failing with a config error when unknown."""
        pattern = self._patterns.get(tag)
        if pattern is None:
            known = ", ".join(self._patterns)
            raise ConfigError.invalid_value(
                "runner.pattern", tag, f"unknown pattern tag (known: {known})"
            )
        return pattern

    def all(self) -> list[LocationPattern]:
        """Get all registered patterns."""
        return list(self._patterns.values())


# Global registry instance
pattern_registry = PatternRegistry()
JEST_PATTERN = pattern_registry.register("jest", JEST_LOCATION_REGEX)


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _match_line(line: str, pattern: LocationPattern) -> SourceLocation | None:
    match = pattern.regex.search(strip_ansi(line))
    if match is None:
        return None
    return SourceLocation(
        file=match.group(pattern.file_group),
        line=int(match.group(pattern.line_group)),
        column=int(match.group(pattern.col_group)),
    )


def find_locations(text: str, pattern: LocationPattern = JEST_PATTERN) -> list[SourceLocation]:
    """Scan *text* for locations, one per matching line, in order."""
    locations: list[SourceLocation] = []
    for line in text.splitlines():
        location = _match_line(line, pattern)
        if location is not None:
            locations.append(location)
    return locations


# =============================================================================
# Process Runs
# =============================================================================


class ResultsSink(Protocol):
    """Receives process output one line at a time, as it arrives."""

    def write(self, line: str) -> None: ...


def _signal_process(process: asyncio.subprocess.Process, *, force: bool) -> None:
    """Signal the process group started for *process*."""
    with contextlib.suppress(ProcessLookupError):
        if _POSIX:
            os.killpg(process.pid, signal.SIGKILL if force else signal.SIGTERM)
        elif force:
            process.kill()
        else:
            process.terminate()


class TestRun:
    """Handle on one test process: its state, its output so far, its locations."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        command: str,
        working_directory: Path,
        *,
        pattern: LocationPattern = JEST_PATTERN,
        sink: ResultsSink | None = None,
    ) -> None:
        self.command = command
        self.working_directory = working_directory
        self.pattern = pattern
        self.state = RunState.IDLE
        self.returncode: int | None = None
        self.run_id: str | None = None
        self._sink = sink
        self._lines: list[str] = []
        self._found: list[SourceLocation] = []
        self._scanned = 0
        self._process: asyncio.subprocess.Process | None = None
        self._pump: asyncio.Task[None] | None = None

    @property
    def output(self) -> str:
        """Everything the process has printed so far."""
        return "".join(f"{line}\n" for line in self._lines)

    async def start(self) -> None:
        """Launch the process. Returns once it is running, not when it exits."""
        if self.state is not RunState.IDLE:
            raise RuntimeError(f"Run already started (state={self.state})")

        self.run_id = set_run_id()
        try:
            self._process = await asyncio.create_subprocess_shell(
                self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=self.working_directory,
                start_new_session=_POSIX,
            )
        except OSError as e:
            raise RunError.start_failed(self.command, str(self.working_directory), str(e)) from e

        self.state = RunState.RUNNING
        log.info(
            "run.started",
            command=self.command,
            cwd=str(self.working_directory),
            pid=self._process.pid,
        )
        self._pump = asyncio.create_task(self._pump_output(self._process))

    def _emit(self, raw: bytes) -> None:
        line = raw.decode(errors="replace").rstrip("\r")
        self._lines.append(line)
        if self._sink is not None:
            self._sink.write(line)

    async def _pump_output(self, process: asyncio.subprocess.Process) -> None:
        assert process.stdout is not None
        pending: list[bytes] = []
        try:
            while chunk := await process.stdout.read(_READ_CHUNK):
                *complete, rest = chunk.split(b"\n")
                for raw in complete:
                    pending.append(raw)
                    self._emit(b"".join(pending))
                    pending = []
                pending.append(rest)
            if any(pending):
                self._emit(b"".join(pending))
        except Exception:
            # The pipe is no longer drained, so the process group must go
            log.warning("run.output_failed", pid=process.pid, exc_info=True)
            _signal_process(process, force=True)
            self.returncode = await process.wait()
            raise

        returncode = await process.wait()
        self.returncode = returncode
        if self.state is RunState.RUNNING:
            self.state = RunState.SUCCEEDED if returncode == 0 else RunState.FAILED
            log.info("run.finished", state=str(self.state), returncode=returncode)

    async def wait(self) -> RunState:
        """Wait for the process to exit (or be cancelled) and return the final state."""
        if self._pump is not None:
            await asyncio.wait({self._pump})
            self._end_correlation()
            if not self._pump.cancelled() and (exc := self._pump.exception()) is not None:
                self.state = RunState.FAILED
                raise exc
        return self.state

    async def cancel(self, grace_sec: float = CANCEL_GRACE_SEC) -> None:
        """Terminate a running process and drop the partial location scan."""
        if self.state is not RunState.RUNNING or self._process is None:
            return

        self.state = RunState.CANCELLED
        self._found = []
        self._scanned = 0

        process = self._process
        _signal_process(process, force=False)
        try:
            await asyncio.wait_for(process.wait(), timeout=grace_sec)
        except TimeoutError:
            _signal_process(process, force=True)
            await process.wait()
        self.returncode = process.returncode

        if self._pump is not None and not self._pump.done():
            self._pump.cancel()
            await asyncio.wait({self._pump})
        log.info("run.cancelled", returncode=self.returncode)
        self._end_correlation()

    def _end_correlation(self) -> None:
        if get_run_id() == self.run_id:
            clear_run_id()

    def locations(self) -> list[SourceLocation]:
        """Locations found in the output received so far.

        Scanning is incremental: each call only looks at lines that arrived
        since the previous call. A cancelled run has no locations.
        """
        if self.state is RunState.CANCELLED:
            return []
        for line in self._lines[self._scanned :]:
            location = _match_line(line, self.pattern)
            if location is not None:
                self._found.append(location)
        self._scanned = len(self._lines)
        return list(self._found)


# =============================================================================
# Navigator
# =============================================================================


class ResultNavigator:
    """Runs commands, remembers the last one, and finds locations in output."""

    def __init__(
        self,
        session: SessionStore | None = None,
        sink: ResultsSink | None = None,
        pattern: LocationPattern = JEST_PATTERN,
    ) -> None:
        self.session: SessionStore = session if session is not None else MemorySessionStore()
        self.sink = sink
        self.pattern = pattern
        self.current: TestRun | None = None

    @property
    def last_command(self) -> LastCommand | None:
        return self.session.get()

    async def run(self, command: str, working_directory: Path) -> TestRun:
        """Start *command* in *working_directory* and record it as the last command."""
        self.session.set(LastCommand(command, working_directory))
        run = TestRun(command, working_directory, pattern=self.pattern, sink=self.sink)
        await run.start()
        self.current = run
        return run

    async def rerun(self) -> TestRun:
        """Run the last command again, in the directory it last ran in."""
        last = self.session.get()
        if last is None:
            log.debug("rerun.empty")
            raise NoPriorCommandError.empty()
        return await self.run(last.command, last.working_directory)

    def find_locations(self, text: str) -> list[SourceLocation]:
        return find_locations(text, self.pattern)
