"""Line/column index over raw source text.

Offsets and columns are counted in code points of the *unmodified* text,
so positions match what an editor shows.  ``\\r\\n``, ``\\n`` and a lone
``\\r`` each end one line.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


@dataclass(frozen=True)
class Position:
    """1-indexed line and character."""

    line: int
    character: int


class SourceIndex:
    """Maps offsets in *text* to 1-indexed (line, character) positions."""

    def __init__(self, text: str) -> None:
        self.text = text
        starts = [0]
        ends: list[int] = []
        for match in _LINE_BREAK_RE.finditer(text):
            ends.append(match.start())
            starts.append(match.end())
        ends.append(len(text))
        self._starts = starts
        self._ends = ends

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_of(self, offset: int) -> int:
        return max(bisect_right(self._starts, offset), 1)

    def locate(self, offset: int) -> Position:
        """Return the position of *offset*; offsets past the end clamp."""
        offset = min(max(offset, 0), len(self.text))
        line = self.line_of(offset)
        return Position(line, offset - self._starts[line - 1] + 1)

    def line_span(self, line: int) -> tuple[int, int]:
        """Offsets of *line*'s content, excluding its terminator."""
        return self._starts[line - 1], self._ends[line - 1]

    def line_text(self, line: int) -> str:
        start, end = self.line_span(line)
        return self.text[start:end]
