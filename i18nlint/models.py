"""Data models used throughout i18n-lint."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class I18nLintError(Exception):
    """Base class for errors raised by i18n-lint."""


class InvalidArgumentError(I18nLintError, TypeError):
    """The path handed to :func:`i18nlint.lint` is missing or unusable."""


class PositionNotFoundError(I18nLintError, LookupError):
    """A candidate could not be located in the raw source.

    This is an internal inconsistency, not a user error: every candidate
    the parser produced comes from the source text.
    """

    def __init__(self, value: str, offset: int) -> None:
        super().__init__(f"could not locate {value!r} at or after offset {offset}")
        self.value = value
        self.offset = offset


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class CandidateKind(str, enum.Enum):
    """What part of the markup a candidate came from."""

    TEXT = "text"
    ATTRIBUTE = "attribute"

    def __str__(self) -> str:
        return self.value


ERROR_ID = "(error)"

# Rule codes, one per candidate kind.
RULE_CODES: dict[CandidateKind, str] = {
    CandidateKind.TEXT: "W001",
    CandidateKind.ATTRIBUTE: "W002",
}

CONTINUED_SUFFIX = " (continued)"


# ---------------------------------------------------------------------------
# Candidate
# ---------------------------------------------------------------------------


@dataclass
class Candidate:
    """A text or attribute value under consideration."""

    kind: CandidateKind
    value: str
    owning_tag_markup: str
    tag_name: str
    attribute_name: str | None = None
    # Parse-tree node the value came from.  Only used as an identity for
    # document-order tracking, never for positions.
    node: Any = field(default=None, repr=False, compare=False)


# ---------------------------------------------------------------------------
# Evidence
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Evidence:
    """The exact source text of a finding plus its escaped pattern form."""

    literal: str

    @property
    def pattern(self) -> str:
        return re.escape(self.literal)

    def compile(self, flags: int = 0) -> re.Pattern[str]:
        return re.compile(self.pattern, flags)

    def __str__(self) -> str:
        return f"/{self.pattern}/"


# ---------------------------------------------------------------------------
# Error record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LintError:
    """Details of one hardcoded string."""

    id: str
    code: str
    reason: str
    evidence: Evidence
    line: int
    character: int
    scope: str

    @property
    def is_continuation(self) -> bool:
        return self.reason.endswith(CONTINUED_SUFFIX)

    def sort_key(self) -> tuple[int, int]:
        return (self.line, self.character)


@dataclass(frozen=True)
class ErrorRecord:
    """One finding: the file it was found in and its details."""

    file: str
    error: LintError

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "error": {
                "id": self.error.id,
                "code": self.error.code,
                "reason": self.error.reason,
                "evidence": self.error.evidence.pattern,
                "line": self.error.line,
                "character": self.error.character,
                "scope": self.error.scope,
            },
        }


# ---------------------------------------------------------------------------
# Lint result (aggregate over many files, used by the CLI)
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Complete output of an i18n-lint run."""

    paths: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    records: list[ErrorRecord] = field(default_factory=list)

    @property
    def files_with_errors(self) -> list[str]:
        seen: dict[str, None] = {}
        for r in self.records:
            seen.setdefault(r.file, None)
        return list(seen)

    def count(self, kind: CandidateKind) -> int:
        code = RULE_CODES[kind]
        return sum(1 for r in self.records if r.error.code == code)
