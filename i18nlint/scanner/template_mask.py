"""Template mask — spans of template-expression content in raw source.

Given a delimiter pair such as ``("<%", "%>")`` or ``("{{", "}}")`` the
mask records every ``[start, end)`` range from an opening delimiter
through its closing delimiter.  Expressions do not nest; an opening
delimiter with no closing delimiter after it is not a span.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from collections.abc import Iterator, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class TemplateSpan:
    """Half-open offset range of one template expression."""

    start: int
    end: int

    def __contains__(self, offset: int) -> bool:
        return self.start <= offset < self.end


class TemplateMask(Sequence[TemplateSpan]):
    """Ordered, non-overlapping template spans for one source text."""

    def __init__(
        self,
        spans: list[TemplateSpan] | None = None,
        delimiters: tuple[str, str] | None = None,
    ) -> None:
        self._spans = spans or []
        self._starts = [s.start for s in self._spans]
        self.delimiters = delimiters
        if delimiters:
            open_, close = delimiters
            self._expr_re: re.Pattern[str] | None = re.compile(
                re.escape(open_) + ".*?" + re.escape(close), re.DOTALL
            )
        else:
            self._expr_re = None

    def __getitem__(self, index):  # type: ignore[override]
        return self._spans[index]

    def __len__(self) -> int:
        return len(self._spans)

    def __repr__(self) -> str:
        return f"TemplateMask({self._spans!r}, delimiters={self.delimiters!r})"

    # ---- queries over raw offsets ----

    def _first_candidate(self, start: int) -> int:
        """Index of the first span that could end after *start*."""
        return max(bisect_right(self._starts, start) - 1, 0)

    def overlaps(self, start: int, end: int) -> bool:
        """True if ``[start, end)`` touches any template span."""
        for span in self._spans[self._first_candidate(start):]:
            if span.start >= end:
                break
            if span.end > start:
                return True
        return False

    def covers(self, start: int, end: int) -> bool:
        """True if every offset in ``[start, end)`` lies in a template span."""
        return not any(True for _ in self.outside(start, end))

    def outside(self, start: int, end: int) -> Iterator[tuple[int, int]]:
        """Yield the sub-ranges of ``[start, end)`` not covered by a span."""
        pos = start
        for span in self._spans[self._first_candidate(start):]:
            if span.start >= end:
                break
            if span.end <= pos:
                continue
            if span.start > pos:
                yield pos, span.start
            pos = max(pos, span.end)
        if pos < end:
            yield pos, end

    # ---- queries over decoded values ----

    def strip_expressions(self, value: str) -> str:
        """Remove complete template expressions from a decoded value."""
        if self._expr_re is None:
            return value
        return self._expr_re.sub("", value)


def build_mask(text: str, delimiters: Sequence[str] | None = None) -> TemplateMask:
    """Scan *text* once, left to right, for template expressions."""
    if not delimiters:
        return TemplateMask()

    open_, close = delimiters
    spans: list[TemplateSpan] = []
    pos = 0
    while True:
        start = text.find(open_, pos)
        if start == -1:
            break
        stop = text.find(close, start + len(open_))
        if stop == -1:
            # Unbalanced: no later close exists, so nothing else can match.
            break
        pos = stop + len(close)
        spans.append(TemplateSpan(start, pos))
    return TemplateMask(spans, (open_, close))
