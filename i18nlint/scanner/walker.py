"""Markup walker — parse markup and yield text/attribute candidates.

Uses BeautifulSoup with the stdlib ``html.parser`` tree builder, which is
tolerant of template syntax (``<%= ... %>`` and ``{{ ... }}`` survive as
text) and of malformed markup.  The tree is only used to learn *which*
strings are candidates; positions are re-derived from the raw text by the
resolver.
"""

from __future__ import annotations

import html
import warnings
from collections.abc import Iterable, Iterator

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.element import NavigableString, PreformattedString, Tag

from i18nlint.models import Candidate, CandidateKind


def parse(text: str) -> BeautifulSoup:
    """Parse *text* into a read-only tree.

    Multi-valued attributes are disabled so every attribute value is the
    plain string from the source (``class`` is not split into a list).
    XHTML documents are read as HTML.
    """
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        return BeautifulSoup(text, "html.parser", multi_valued_attributes=None)


def is_text(node: object) -> bool:
    """True for text nodes; comments, doctypes, CDATA etc. are not text."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def render_open_tag(tag: Tag) -> str:
    """Render the opening tag of *tag* the way the parser would print it."""
    parts = [f"<{tag.name}"]
    for name, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        parts.append(f' {name}="{html.escape(value or "")}"')
    parts.append(">")
    return "".join(parts)


def walk(
    tree: BeautifulSoup,
    ignore_tags: Iterable[str] = (),
    attributes: Iterable[str] = (),
) -> Iterator[Candidate]:
    """Depth-first, pre-order walk yielding candidates in document order.

    Subtrees rooted at a tag in *ignore_tags* are skipped entirely.  For
    each visited element the attributes named in *attributes* are yielded
    first (in source order), then its children in order.  Text is
    attributed to its innermost enclosing element only.  Text directly
    under the document root has no enclosing element and is not a
    candidate, so partials with top-level text (``x<br>Hello``) are not
    scanned there.
    """
    ignored = {t.lower() for t in ignore_tags}
    wanted = {a.lower() for a in attributes}

    stack: list[object] = list(reversed(list(tree.children)))
    while stack:
        node = stack.pop()

        if isinstance(node, Tag):
            if node.name.lower() in ignored:
                continue
            markup = render_open_tag(node)
            for name, value in node.attrs.items():
                if name.lower() not in wanted:
                    continue
                if isinstance(value, list):
                    value = " ".join(value)
                yield Candidate(
                    kind=CandidateKind.ATTRIBUTE,
                    value=value or "",
                    owning_tag_markup=markup,
                    tag_name=node.name,
                    attribute_name=name,
                    node=node,
                )
            stack.extend(reversed(list(node.children)))

        elif is_text(node):
            parent = node.parent
            if parent is None or parent is tree:
                # Bare text at the document root has no owning element.
                continue
            yield Candidate(
                kind=CandidateKind.TEXT,
                value=str(node),
                owning_tag_markup=render_open_tag(parent),
                tag_name=parent.name,
                node=node,
            )
