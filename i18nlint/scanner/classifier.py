"""Candidate classifier — decide whether a candidate is hardcoded text."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass

from i18nlint.models import ERROR_ID, RULE_CODES, Candidate, CandidateKind
from i18nlint.scanner.template_mask import TemplateMask

# Control/format characters render as nothing, like whitespace.
_INVISIBLE_CATEGORIES = frozenset({"Cc", "Cf"})


@dataclass(frozen=True)
class Classification:
    """Rule assignment for an accepted candidate."""

    id: str
    code: str
    reason: str


def is_blank(value: str) -> bool:
    """True if *value* renders as nothing: whitespace and control chars only."""
    return all(
        ch.isspace() or unicodedata.category(ch) in _INVISIBLE_CATEGORIES
        for ch in value
    )


def reason_for(candidate: Candidate) -> str:
    if candidate.kind is CandidateKind.ATTRIBUTE:
        return f"Hardcoded '{candidate.attribute_name}' attribute"
    return f"Hardcoded <{candidate.tag_name}> tag"


def classify(candidate: Candidate, mask: TemplateMask) -> Classification | None:
    """Return the rule that fires for *candidate*, or ``None`` to skip it.

    A candidate is skipped when, once template expressions are removed,
    nothing visible is left.  Values are decoded by the parser, so
    whitespace entities such as ``&nbsp;`` are already plain characters.
    """
    literal = mask.strip_expressions(candidate.value)
    if is_blank(literal):
        return None
    return Classification(
        id=ERROR_ID,
        code=RULE_CODES[candidate.kind],
        reason=reason_for(candidate),
    )
