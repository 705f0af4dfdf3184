"""Scanner — find hardcoded strings in markup files and build error records."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from i18nlint.config import LintOptions
from i18nlint.models import (
    CONTINUED_SUFFIX,
    CandidateKind,
    ErrorRecord,
    Evidence,
    InvalidArgumentError,
    LintError,
)
from i18nlint.scanner.classifier import Classification, classify
from i18nlint.scanner.resolver import PositionResolver, Span
from i18nlint.scanner.source_index import SourceIndex
from i18nlint.scanner.template_mask import build_mask
from i18nlint.scanner.walker import parse, walk

logger = logging.getLogger(__name__)

# Default ignore directories.
DEFAULT_EXCLUDE_DIRS: set[str] = {
    ".git",
    "node_modules",
    "dist",
    "build",
    ".venv",
    "venv",
    "__pycache__",
}

# Default scannable extensions.
DEFAULT_INCLUDE_EXTS: set[str] = {
    ".html", ".htm", ".xhtml", ".ejs", ".hbs", ".handlebars", ".mustache",
    ".njk", ".jinja", ".jinja2", ".j2", ".erb", ".tpl", ".twig", ".vue",
}


# ---------------------------------------------------------------------------
# File collection
# ---------------------------------------------------------------------------


def _matches_any_glob(path: str, globs: list[str]) -> bool:
    """Return True if *path* matches any of the *globs*."""
    return any(fnmatch.fnmatch(path, g) for g in globs)


def collect_files(
    root: str | Path,
    include_globs: list[str] | None = None,
    exclude_globs: list[str] | None = None,
) -> list[Path]:
    """Return the markup files under *root* (or *root* itself if a file)."""
    root_path = Path(root)
    if root_path.is_file():
        return [root_path]
    if not root_path.is_dir():
        return []

    excludes = list(exclude_globs or [])
    collected: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root_path):
        # Prune excluded directories in-place
        dirnames[:] = [
            d for d in dirnames
            if d not in DEFAULT_EXCLUDE_DIRS
            and not _matches_any_glob(d, excludes)
        ]

        for fname in filenames:
            fpath = Path(dirpath) / fname
            rel = fpath.relative_to(root_path).as_posix()

            if excludes and (
                _matches_any_glob(rel, excludes) or _matches_any_glob(fname, excludes)
            ):
                continue

            if include_globs:
                if not _matches_any_glob(rel, include_globs) and not _matches_any_glob(fname, include_globs):
                    continue
            elif fpath.suffix.lower() not in DEFAULT_INCLUDE_EXTS:
                continue

            collected.append(fpath)

    collected.sort()
    return collected


# ---------------------------------------------------------------------------
# Record building
# ---------------------------------------------------------------------------


def split_lines(
    rule: Classification,
    span: Span,
    index: SourceIndex,
) -> list[LintError]:
    """Split a text span into one error per source line it shows text on."""
    text = index.text
    first_line = index.line_of(span.start)
    last_line = index.line_of(max(span.end - 1, span.start))

    errors: list[LintError] = []
    for line in range(first_line, last_line + 1):
        line_start, line_end = index.line_span(line)
        start = max(span.start, line_start)
        end = min(span.end, line_end)
        fragment = text[start:end]
        stripped = fragment.strip()
        if not stripped:
            continue
        start += len(fragment) - len(fragment.lstrip())
        pos = index.locate(start)
        reason = rule.reason if not errors else rule.reason + CONTINUED_SUFFIX
        errors.append(LintError(
            id=rule.id,
            code=rule.code,
            reason=reason,
            evidence=Evidence(stripped),
            line=pos.line,
            character=pos.character,
            scope=index.line_text(line).strip(),
        ))
    return errors


def _attribute_record(rule: Classification, span: Span, index: SourceIndex) -> LintError:
    pos = index.locate(span.start)
    return LintError(
        id=rule.id,
        code=rule.code,
        reason=rule.reason,
        evidence=Evidence(index.text[span.start:span.end]),
        line=pos.line,
        character=pos.character,
        scope=span.scope or index.line_text(pos.line).strip(),
    )


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def scan_text(
    text: str,
    file_label: str,
    options: LintOptions | Mapping[str, Any] | None = None,
) -> list[ErrorRecord]:
    """Scan markup *text* and return its error records in source order."""
    opts = LintOptions.coerce(options)

    index = SourceIndex(text)
    mask = build_mask(text, opts.template_delimiters)
    tree = parse(text)
    resolver = PositionResolver(text, tree, mask)

    groups: list[list[LintError]] = []
    for candidate in walk(tree, opts.ignore_tags, opts.attributes):
        rule = classify(candidate, mask)
        if rule is None:
            continue
        span = resolver.resolve(candidate)
        if span is None:
            continue
        if candidate.kind is CandidateKind.TEXT:
            group = split_lines(rule, span, index)
        else:
            group = [_attribute_record(rule, span, index)]
        if group:
            groups.append(group)

    # Stable: ties keep discovery order, continuations stay with their first.
    groups.sort(key=lambda g: g[0].sort_key())
    records = [ErrorRecord(file=file_label, error=e) for g in groups for e in g]
    logger.debug("%s: %d hardcoded string(s)", file_label, len(records))
    return records


def _coerce_path(file_path: object) -> str:
    if file_path is None:
        raise InvalidArgumentError("path must be defined")
    if not isinstance(file_path, (str, os.PathLike)):
        raise InvalidArgumentError(
            f"path must be a string or path-like object, not {type(file_path).__name__}"
        )
    path = os.fspath(file_path)
    if isinstance(path, bytes):
        path = os.fsdecode(path)
    if not path:
        raise InvalidArgumentError("path must be a non-empty string")
    return path


def lint(
    file_path: str | os.PathLike[str],
    options: LintOptions | Mapping[str, Any] | None = None,
) -> list[ErrorRecord]:
    """Scan one file for hardcoded strings.

    *options* may be a :class:`~i18nlint.config.LintOptions` or a mapping
    with any of ``attributes``, ``templateDelimiters`` and ``ignoreTags``;
    other keys are ignored.  Raises :class:`InvalidArgumentError` for a
    missing or unusable path and lets ``OSError`` through for unreadable
    files.
    """
    path = _coerce_path(file_path)
    opts = LintOptions.coerce(options)
    # newline="" keeps CRLF so offsets match the file on disk.
    with open(path, encoding="utf-8-sig", errors="replace", newline="") as fh:
        text = fh.read()
    return scan_text(text, path, opts)
