"""Tests for jestrun locations command."""

from __future__ import annotations

import json
import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from jestrun.cli.main import cli

runner = CliRunner()

JEST_OUTPUT = """\
 FAIL  src/sum.test.js
  ● sum › adds

    expect(received).toBe(expected) // Object.is equality

      at Object.<anonymous> (src/sum.test.js:5:23)
      at addSpecsToSuite (node_modules/jest-jasmine2/build/jasmine/Env.js:522:17)
"""


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Run with built-in defaults only."""
    for key in list(os.environ):
        if key.upper().startswith("JESTRUN__"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    with patch("jestrun.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "missing.yaml"):
        yield


class TestLocationsCommand:
    """jestrun locations command tests."""

    def test_given_stdin_when_locations_then_lists_in_order(self) -> None:
        result = runner.invoke(cli, ["locations"], input=JEST_OUTPUT)

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "src/sum.test.js:5:23",
            "node_modules/jest-jasmine2/build/jasmine/Env.js:522:17",
        ]

    def test_given_file_when_locations_then_reads_file(self, tmp_path: Path) -> None:
        output_file = tmp_path / "jest.log"
        output_file.write_text(JEST_OUTPUT)

        result = runner.invoke(cli, ["locations", str(output_file)])

        assert "src/sum.test.js:5:23" in result.output

    def test_given_base_dir_when_locations_then_paths_resolved(self, tmp_path: Path) -> None:
        result = runner.invoke(
            cli, ["locations", "--base-dir", str(tmp_path)], input=JEST_OUTPUT
        )

        assert result.output.splitlines()[0] == f"{tmp_path / 'src' / 'sum.test.js'}:5:23"

    def test_given_json_flag_when_locations_then_json_rows(self) -> None:
        result = runner.invoke(cli, ["locations", "--json"], input=JEST_OUTPUT)

        rows = json.loads(result.output)
        assert rows[0] == {"file": "src/sum.test.js", "line": 5, "column": 23}
        assert len(rows) == 2

    def test_given_no_stack_lines_when_locations_then_empty(self) -> None:
        result = runner.invoke(cli, ["locations"], input="PASS  src/sum.test.js\n")

        assert result.exit_code == 0
        assert result.output == ""

    def test_given_unknown_pattern_when_locations_then_fails(self, tmp_path: Path) -> None:
        (tmp_path / ".jestrun.yaml").write_text("runner:\n  pattern: mocha\n")

        result = runner.invoke(cli, ["locations"], input=JEST_OUTPUT)

        assert result.exit_code == 1
        assert "unknown pattern tag" in result.output
