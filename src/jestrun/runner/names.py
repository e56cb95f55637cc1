"""Test block name extraction for run-at-point.

This is a line scanner, not a JavaScript parser. The label is whatever sits
between ``<keyword>(`` and the first following comma, minus its first and
last characters. That means:

- ``describe("adds numbers", ...)`` gives ``adds numbers``
- ``describe(`with ${x}`, ...)`` gives ``with ${x}`` (template left as-is)
- labels containing a comma are cut at the comma
- an unquoted label such as ``describe(Suite, ...)`` loses real characters
- ``describe.each(...)`` and ``describe.only(...)`` do not match

Swap in another ``NameExtractor`` when those cases matter.
"""

from __future__ import annotations

import re
from typing import Protocol

DEFAULT_BLOCK_KEYWORD = "describe"


class NameExtractor(Protocol):
    """Finds the test name to filter on at a cursor position."""

    def extract_at(self, text: str, offset: int) -> str | None:
        """Return the label of the block enclosing *offset*, or None."""
        ...


class KeywordLineExtractor:
    """Backward line scan for the nearest ``<keyword>(`` declaration."""

    def __init__(self, keyword: str = DEFAULT_BLOCK_KEYWORD) -> None:
        self.keyword = keyword
        self._label_re = re.compile(re.escape(keyword) + r"\((.*?),")

    def extract_at(self, text: str, offset: int) -> str | None:
        offset = max(0, min(offset, len(text)))
        # Include the whole line the cursor sits on
        line_end = text.find("\n", offset)
        if line_end == -1:
            line_end = len(text)

        for line in reversed(text[:line_end].splitlines()):
            if line.lstrip().startswith(self.keyword):
                return self._label_from(line)
        return None

    def _label_from(self, line: str) -> str | None:
        match = self._label_re.search(line)
        if match is None:
            return None
        label = match.group(1)[1:-1]
        return label or None


def offset_for(text: str, line: int, column: int = 1) -> int:
    """Convert a 1-based line/column cursor into a character offset.

    Lines past the end clamp to the end of the text; columns past the end
    of their line clamp to the line end.
    """
    if line < 1 or column < 1:
        raise ValueError(f"line and column are 1-based, got {line}:{column}")

    lines = text.splitlines(keepends=True)
    if line > len(lines):
        return len(text)

    start = sum(len(chunk) for chunk in lines[: line - 1])
    content = lines[line - 1].rstrip("\r\n")
    return start + min(column - 1, len(content))
