"""Position resolver — map candidates back to offsets in the raw source.

The parser normalizes what it reads (entities decoded, quotes and case
rewritten, missing end tags added), so its output can't be searched for
naively.  Instead the resolver keeps one forward cursor over the raw text
and advances through *every* node of the parse tree in document order,
anchoring each one at the first matching spot at or after the cursor:

* an element is anchored at the next ``<name`` boundary outside comments
  and declarations, and the cursor moves past its opening tag;
* a text node is anchored where its (re-encoded) content next occurs,
  and the cursor moves past it.

Because nodes inside ignored subtrees are anchored too, their content is
consumed and can never be mistaken for a later candidate.  Identical
strings therefore resolve to strictly increasing offsets.
"""

from __future__ import annotations

import html
import logging
import re
from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass, field
from itertools import groupby

from bs4 import BeautifulSoup
from bs4.element import Tag

from i18nlint.models import Candidate, CandidateKind, PositionNotFoundError
from i18nlint.scanner.classifier import is_blank
from i18nlint.scanner.template_mask import TemplateMask
from i18nlint.scanner.walker import is_text, render_open_tag

logger = logging.getLogger(__name__)

# Named, decimal and hex character references (semicolon optional, as
# browsers accept).
_ENTITY = r"&(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);?"
_ENTITY_RE = re.compile(_ENTITY)
_WHITESPACE_PIECE = rf"(?:\s|{_ENTITY})+"

# Named reference as the parser tokenizes it; unknown ones are kept as text.
_BARE_REF_RE = re.compile(r"&[A-Za-z][-.A-Za-z0-9]*")

# Comments, CDATA sections, declarations and processing instructions.
_OPAQUE = r"<!--.*?(?:-->|\Z)|<!\[CDATA\[.*?(?:\]\]>|\Z)|<![^>]*>?|<\?[^>]*>?"
_OPAQUE_RE = re.compile(_OPAQUE, re.DOTALL)

# What may sit between the end of one node and the start of the next
# text node: end tags and opaque constructs.
_GAP_RE = re.compile(rf"(?:</[^>]*>?|{_OPAQUE})*", re.DOTALL)

_ATTR_GAP_RE = re.compile(r"(?:\s|/(?!>))*")
_ATTR_RE = re.compile(
    r"""
    (?P<name>[^\s/>=][^\s/>=]*)
    (?:\s*=\s*
      (?:'(?P<sq>[^']*)'
        |"(?P<dq>[^"]*)"
        |(?P<bare>(?!['"])[^\s>]*)
      )
    )?
    """,
    re.VERBOSE,
)


def _squash(value: str) -> str:
    return " ".join(value.split())


def _literal_pattern(value: str) -> str:
    parts: list[str] = []
    for blank, run in groupby(value, key=str.isspace):
        if blank:
            parts.append(_WHITESPACE_PIECE)
            continue
        for ch in run:
            if ch.isascii() and ch.isalnum():
                parts.append(ch)
            else:
                parts.append(f"(?:{re.escape(ch)}|{_ENTITY})")
    return "".join(parts)


def value_pattern(value: str) -> re.Pattern[str]:
    """Pattern matching *value* as it may be written in markup.

    Every character other than an ASCII letter or digit may also appear as
    a character reference, and whitespace runs match any whitespace run.
    Literal characters are always escaped.  An unknown named reference such
    as ``&T;`` reaches the tree as ``&T``, so a ``;`` may follow it.
    """
    parts: list[str] = []
    pos = 0
    for m in _BARE_REF_RE.finditer(value):
        parts.append(_literal_pattern(value[pos:m.start()]))
        parts.append(_literal_pattern(m.group()) + ";?")
        pos = m.end()
    parts.append(_literal_pattern(value[pos:]))
    return re.compile("".join(parts))


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Attribute:
    """One attribute as written in the raw opening tag."""

    name: str
    value_start: int
    value_end: int


@dataclass(frozen=True)
class Anchor:
    """Raw extent of an element's opening tag."""

    start: int
    end: int
    attributes: tuple[Attribute, ...] = field(default=())

    def attribute(self, name: str) -> Attribute | None:
        """Last attribute named *name*; duplicates resolve like the parser."""
        found = None
        for attr in self.attributes:
            if attr.name.lower() == name.lower():
                found = attr
        return found


def scan_open_tag(text: str, start: int, name_end: int) -> Anchor:
    """Read the opening tag that starts at *start*.

    Quoted values may contain ``>`` and ``<``.  A tag that never closes
    runs to the end of the text.
    """
    attrs: list[Attribute] = []
    pos, n = name_end, len(text)
    while pos < n:
        pos = _ATTR_GAP_RE.match(text, pos).end()
        if pos >= n:
            break
        if text.startswith("/>", pos):
            return Anchor(start, pos + 2, tuple(attrs))
        if text[pos] == ">":
            return Anchor(start, pos + 1, tuple(attrs))
        m = _ATTR_RE.match(text, pos)
        if m is None:
            pos += 1
            continue
        for group in ("sq", "dq", "bare"):
            if m.group(group) is not None:
                attrs.append(Attribute(m.group("name"), m.start(group), m.end(group)))
                break
        else:
            attrs.append(Attribute(m.group("name"), m.end(), m.end()))
        pos = m.end()
    return Anchor(start, n, tuple(attrs))


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Span:
    """Raw evidence range of a candidate.

    ``scope`` is set for attribute candidates: the raw opening tag.
    """

    start: int
    end: int
    scope: str | None = None


class PositionResolver:
    """Resolve candidates of one parse tree against its raw source.

    Candidates must be resolved in document order, as produced by
    :func:`i18nlint.scanner.walker.walk`.
    """

    def __init__(self, text: str, tree: BeautifulSoup, mask: TemplateMask) -> None:
        self.text = text
        self.mask = mask
        self._cursor = 0
        self._nodes: Iterator[object] = iter(tree.descendants)
        self._last_node: object = None
        self._last_span: Anchor | tuple[int, int] | None = None
        self._boundaries: dict[str, re.Pattern[str]] = {}
        self._opaque_starts: list[int] = []
        self._opaque_ends: list[int] = []
        self._scan_opaque(0)

    # ---- public API ----

    def resolve(self, candidate: Candidate) -> Span | None:
        """Return the evidence span of *candidate*.

        ``None`` means the candidate's content lies entirely inside
        template expressions.  Raises :class:`PositionNotFoundError` if the
        candidate can't be found at all.
        """
        located = self._seek(candidate.node)
        if candidate.kind is CandidateKind.ATTRIBUTE:
            if not isinstance(located, Anchor):
                raise PositionNotFoundError(candidate.owning_tag_markup, self._cursor)
            start, end = self._locate_attribute(candidate, located)
            scope: str | None = self.text[located.start:located.end]
        else:
            if not isinstance(located, tuple):
                raise PositionNotFoundError(candidate.value, self._cursor)
            start, end = located
            scope = None

        evidence = self.evidence_range(start, end)
        if evidence is None:
            logger.debug("candidate %r is template expression only", candidate.value)
            return None
        return Span(evidence[0], evidence[1], scope)

    def evidence_range(self, start: int, end: int) -> tuple[int, int] | None:
        """First literal fragment of ``[start, end)`` outside templates, trimmed."""
        for frag_start, frag_end in self.mask.outside(start, end):
            s, e = self._trim(frag_start, frag_end)
            if s < e:
                return s, e
        return None

    # ---- document-order traversal ----

    def _seek(self, target: object) -> Anchor | tuple[int, int]:
        if target is self._last_node and self._last_span is not None:
            return self._last_span
        for node in self._nodes:
            strict = node is target
            located = self._locate(node, strict)
            self._last_node, self._last_span = node, located
            if strict and located is not None:
                return located
        raise PositionNotFoundError(str(target), self._cursor)

    def _locate(self, node: object, strict: bool) -> Anchor | tuple[int, int] | None:
        if isinstance(node, Tag):
            return self._anchor_tag(node, strict)
        if is_text(node):
            return self._locate_text(str(node), strict)
        return None

    def _scan_opaque(self, start: int) -> None:
        opaque = [(m.start(), m.end()) for m in _OPAQUE_RE.finditer(self.text, start)]
        self._opaque_starts = [s for s, _ in opaque]
        self._opaque_ends = [e for _, e in opaque]

    def _in_opaque(self, offset: int) -> bool:
        """True if *offset* lies in a comment, CDATA section or declaration.

        Ranges are only trusted from the cursor on.  The cursor never stops
        inside a real comment, so if it sits inside a range, that range
        began in a quoted attribute value or a script body the cursor has
        since consumed, and the ranges are recomputed from the cursor.
        """
        i = bisect_right(self._opaque_starts, self._cursor) - 1
        if i >= 0 and self._opaque_starts[i] < self._cursor < self._opaque_ends[i]:
            self._scan_opaque(self._cursor)
        i = bisect_right(self._opaque_starts, offset) - 1
        return i >= 0 and offset < self._opaque_ends[i]

    # ---- elements ----

    def _boundary(self, name: str) -> re.Pattern[str]:
        pattern = self._boundaries.get(name)
        if pattern is None:
            pattern = re.compile(
                "<" + re.escape(name) + r"(?=[\s/>]|\Z)", re.IGNORECASE
            )
            self._boundaries[name] = pattern
        return pattern

    def _anchor_tag(self, tag: Tag, strict: bool) -> Anchor | None:
        for m in self._boundary(tag.name).finditer(self.text, self._cursor):
            if self._in_opaque(m.start()):
                continue
            anchor = scan_open_tag(self.text, m.start(), m.end())
            if not self._matches(tag, anchor):
                logger.debug(
                    "opening tag at %d differs from parsed <%s>; using it anyway",
                    anchor.start,
                    tag.name,
                )
            self._cursor = anchor.end
            return anchor
        if strict:
            raise PositionNotFoundError(f"<{tag.name}>", self._cursor)
        logger.debug("no opening tag found for <%s> after %d", tag.name, self._cursor)
        return None

    def _matches(self, tag: Tag, anchor: Anchor) -> bool:
        """Compare a raw opening tag with the parsed element.

        First exactly against the parser's rendering, then normalized:
        names lowercased, values decoded, whitespace collapsed.
        """
        raw = self.text[anchor.start:anchor.end]
        if raw == render_open_tag(tag):
            return True
        parsed = {
            name.lower(): _squash(" ".join(v) if isinstance(v, list) else v or "")
            for name, v in tag.attrs.items()
        }
        written = {
            a.name.lower(): _squash(html.unescape(self.text[a.value_start:a.value_end]))
            for a in anchor.attributes
        }
        return parsed == written

    # ---- attributes ----

    def _locate_attribute(self, candidate: Candidate, anchor: Anchor) -> tuple[int, int]:
        attr = self._anchor_attribute(candidate, anchor)
        if attr is not None:
            return attr.value_start, attr.value_end
        # Malformed tag: fall back to the decoded value inside the tag.
        found = self._search(candidate.value, anchor.start, anchor.end)
        if found is None:
            raise PositionNotFoundError(candidate.value, anchor.start)
        return found

    @staticmethod
    def _anchor_attribute(candidate: Candidate, anchor: Anchor) -> Attribute | None:
        attr = anchor.attribute(candidate.attribute_name or "")
        if attr is None or attr.value_start == attr.value_end:
            return None
        return attr

    # ---- text ----

    def _locate_text(self, value: str, strict: bool) -> tuple[int, int] | None:
        start = self._cursor
        if not self.text.startswith(value, start):
            start = _GAP_RE.match(self.text, start).end()
        if self.text.startswith(value, start):
            found: tuple[int, int] | None = (start, start + len(value))
        elif is_blank(value):
            # Nothing to anchor on; whitespace can't be confused with a
            # later candidate.
            return None
        else:
            found = self._search(value, self._cursor, len(self.text))

        if found is None:
            if strict:
                raise PositionNotFoundError(value, self._cursor)
            logger.debug("text %r not found after %d", value[:40], self._cursor)
            return None
        self._cursor = found[1]
        return found

    def _search(self, value: str, start: int, end: int) -> tuple[int, int] | None:
        """Find *value* as written in markup within ``[start, end)``.

        Matches are checked by decoding them; the first match that decodes
        to *value* wins, otherwise the first match at all.
        """
        fallback = None
        wanted = _squash(value)
        for m in value_pattern(value).finditer(self.text, start, end):
            if self._in_opaque(m.start()):
                continue
            if _squash(html.unescape(m.group())) == wanted:
                return m.start(), m.end()
            if fallback is None:
                fallback = (m.start(), m.end())
        return fallback

    def _trim(self, start: int, end: int) -> tuple[int, int]:
        """Shrink ``[start, end)`` past whitespace and blank entities."""
        text = self.text
        while start < end:
            if text[start].isspace():
                start += 1
                continue
            m = _ENTITY_RE.match(text, start, end)
            if m is None or not is_blank(html.unescape(m.group())):
                break
            start = m.end()
        while end > start:
            if text[end - 1].isspace():
                end -= 1
                continue
            amp = text.rfind("&", start, end)
            if amp == -1:
                break
            m = _ENTITY_RE.fullmatch(text, amp, end)
            if m is None or not is_blank(html.unescape(m.group())):
                break
            end = amp
        return start, end
