"""User-facing test actions.

The four actions an editor binds to keys, exposed as a plain command table::

    actions = TestActions.from_config(config.runner)
    run = await dispatch(actions, "run-at-point", path=Path("src/sum.test.ts"), offset=120)
    await run.wait()
    for location in run.locations():
        ...

Each action resolves the file, finds the project root to run in, builds the
command line and hands it to the ``ResultNavigator``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any

from jestrun.config.models import RunnerConfig
from jestrun.core.errors import NotFoundError
from jestrun.core.logging import get_logger
from jestrun.runner.command import build_command, build_filtered_command
from jestrun.runner.names import KeywordLineExtractor, NameExtractor
from jestrun.runner.navigator import ResultNavigator, ResultsSink, TestRun, pattern_registry
from jestrun.runner.root import locate_project_root
from jestrun.runner.session import SessionStore

log = get_logger("actions")


class TestActions:
    """The run-current-file / run-all-tests / run-at-point / rerun-last actions."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        config: RunnerConfig,
        navigator: ResultNavigator,
        *,
        extractor: NameExtractor | None = None,
        default_directory: Callable[[], Path] = Path.cwd,
    ) -> None:
        self.config = config
        self.navigator = navigator
        self.extractor = extractor or KeywordLineExtractor(config.block_keyword)
        self._default_directory = default_directory

    @classmethod
    def from_config(
        cls,
        config: RunnerConfig,
        *,
        session: SessionStore | None = None,
        sink: ResultsSink | None = None,
    ) -> TestActions:
        """Build actions with a navigator using the configured output pattern."""
        pattern = pattern_registry.require(config.pattern)
        return cls(config, ResultNavigator(session=session, sink=sink, pattern=pattern))

    def project_root(self, path: Path) -> Path:
        return locate_project_root(
            path,
            self._default_directory(),
            manifest=self.config.manifest,
            step=self.config.root_search_step,
        )

    def _options(self, options: Sequence[str] | None) -> Sequence[str]:
        return self.config.options if options is None else options

    @staticmethod
    def _require_file(path: Path | None) -> Path:
        if path is None:
            raise NotFoundError.no_backing_file()
        if not path.is_file():
            raise NotFoundError.no_backing_file(str(path))
        return path.absolute()

    async def run_current_file(
        self, path: Path | None, *, options: Sequence[str] | None = None
    ) -> TestRun:
        """Run the tests in the file at *path*."""
        file_path = self._require_file(path)
        command = build_command(self.config.command, self._options(options), str(file_path))
        return await self.navigator.run(command, self.project_root(file_path))

    async def run_all_tests(
        self, path: Path | None = None, *, options: Sequence[str] | None = None
    ) -> TestRun:
        """Run the whole project that *path* (or the default directory) belongs to."""
        start = path if path is not None else self._default_directory()
        command = build_command(self.config.command, self._options(options), "")
        return await self.navigator.run(command, self.project_root(start))

    async def run_at_point(
        self,
        path: Path | None,
        offset: int,
        *,
        text: str | None = None,
        options: Sequence[str] | None = None,
    ) -> TestRun:
        """Run only the block enclosing *offset* in the file at *path*.

        *text* is the buffer contents; it defaults to the file on disk, pass
        it explicitly for unsaved buffers.
        """
        file_path = self._require_file(path)
        if text is None:
            text = file_path.read_text(encoding="utf-8", errors="replace")

        name = self.extractor.extract_at(text, offset)
        if name is None:
            log.debug("block.not_found", path=str(file_path), offset=offset)
            raise NotFoundError.no_test_block(str(file_path), self.config.block_keyword)

        log.debug("block.found", path=str(file_path), name=name)
        command = build_filtered_command(
            self.config.command, self._options(options), str(file_path), name
        )
        return await self.navigator.run(command, self.project_root(file_path))

    async def rerun_last(self) -> TestRun:
        """Run the last command again."""
        return await self.navigator.rerun()


Action = Callable[..., Awaitable[TestRun]]

ACTIONS: dict[str, Action] = {
    "run-current-file": TestActions.run_current_file,
    "run-all-tests": TestActions.run_all_tests,
    "run-at-point": TestActions.run_at_point,
    "rerun-last": TestActions.rerun_last,
}


def dispatch(actions: TestActions, name: str, **kwargs: Any) -> Awaitable[TestRun]:
    """Invoke the action registered under *name*."""
    try:
        action = ACTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown action: {name} (known: {', '.join(ACTIONS)})") from None
    return action(actions, **kwargs)
