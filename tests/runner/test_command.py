"""Tests for runner/command.py module."""

from __future__ import annotations

import shlex

import pytest

from jestrun.runner.command import (
    FILTER_FLAG,
    build_command,
    build_filtered_command,
    with_filter,
)


class TestBuildCommand:
    """Tests for build_command function."""

    def test_file_target(self) -> None:
        result = build_command("npx jest", ["--color"], "/work/app/sum.test.js")

        assert result == "npx jest --color /work/app/sum.test.js"

    def test_empty_target_left_out(self) -> None:
        assert build_command("npx jest", ["--color"], "") == "npx jest --color"

    def test_none_target_left_out(self) -> None:
        assert build_command("npx jest", ["--color"], None) == "npx jest --color"

    def test_no_options(self) -> None:
        assert build_command("npx jest", [], "a.test.js") == "npx jest a.test.js"

    def test_base_used_verbatim(self) -> None:
        result = build_command("  yarn jest --config jest.e2e.js ", [], "")

        assert result == "yarn jest --config jest.e2e.js"

    def test_options_escaped_in_order(self) -> None:
        result = build_command("npx jest", ["--color", "--testNamePattern=a b", "--ci"], "")

        assert result == "npx jest --color '--testNamePattern=a b' --ci"

    def test_target_with_spaces_escaped(self) -> None:
        result = build_command("npx jest", [], "/work/my app/sum.test.js")

        assert shlex.split(result) == ["npx", "jest", "/work/my app/sum.test.js"]

    def test_shell_metacharacters_escaped(self) -> None:
        name = "it's $HOME; rm -rf /"
        result = build_command("npx jest", ["-t", name], "")

        assert shlex.split(result)[-1] == name


class TestWithFilter:
    """Tests for with_filter function."""

    def test_appends_filter_pair(self) -> None:
        assert with_filter(["--color"], "sum") == ["--color", FILTER_FLAG, "sum"]

    def test_does_not_mutate_input(self) -> None:
        options = ["--color"]
        with_filter(options, "sum")

        assert options == ["--color"]


class TestBuildFilteredCommand:
    """Tests for build_filtered_command function."""

    def test_filter_precedes_target(self) -> None:
        result = build_filtered_command("npx jest", ["--color"], "/w/sum.test.js", "adds numbers")

        assert result == "npx jest --color -t 'adds numbers' /w/sum.test.js"

    @pytest.mark.parametrize("name", ["with ${x}", 'say "hi"', "a'b"])
    def test_name_survives_shell_parsing(self, name: str) -> None:
        result = build_filtered_command("npx jest", [], "/w/t.test.js", name)

        assert shlex.split(result) == ["npx", "jest", "-t", name, "/w/t.test.js"]


class TestDeterminism:
    """Builders keep no state between calls."""

    def test_same_arguments_same_command(self) -> None:
        options = ["--color", "--ci"]

        first = build_command("npx jest", options, "/w/sum.test.js")
        second = build_command("npx jest", options, "/w/sum.test.js")

        assert first == second
        assert options == ["--color", "--ci"]

    def test_same_arguments_same_filtered_command(self) -> None:
        options = ["--color"]

        first = build_filtered_command("npx jest", options, "/w/sum.test.js", "adds numbers")
        second = build_filtered_command("npx jest", options, "/w/sum.test.js", "adds numbers")

        assert first == second
        assert options == ["--color"]
