"""Test runner module - build, run and navigate jest invocations."""

from jestrun.runner.actions import ACTIONS, TestActions, dispatch
from jestrun.runner.command import build_command, build_filtered_command, with_filter
from jestrun.runner.models import LastCommand, RunState, SourceLocation
from jestrun.runner.names import KeywordLineExtractor, NameExtractor
from jestrun.runner.navigator import (
    ResultNavigator,
    TestRun,
    find_locations,
    pattern_registry,
)
from jestrun.runner.root import locate_project_root

__all__ = [
    "ACTIONS",
    "TestActions",
    "dispatch",
    "build_command",
    "build_filtered_command",
    "with_filter",
    "LastCommand",
    "RunState",
    "SourceLocation",
    "KeywordLineExtractor",
    "NameExtractor",
    "ResultNavigator",
    "TestRun",
    "find_locations",
    "pattern_registry",
    "locate_project_root",
]
