"""Report rendering — text and JSON outputs."""

from __future__ import annotations

import json
from typing import Any

import i18nlint
from i18nlint.models import CandidateKind, ErrorRecord, LintResult

# ---------------------------------------------------------------------------
# Text output
# ---------------------------------------------------------------------------

_BOLD = "\033[1m"
_GREY = "\033[90m"
_YELLOW = "\033[93m"
_RESET = "\033[0m"


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{_RESET}" if color else text


def render_text(result: LintResult, color: bool = True) -> str:
    """Produce human-friendly text output, grouped by file."""
    lines: list[str] = []

    by_file: dict[str, list[ErrorRecord]] = {}
    for r in result.records:
        by_file.setdefault(r.file, []).append(r)

    for path, records in by_file.items():
        lines.append(_paint(path, _BOLD, color))
        for r in records:
            e = r.error
            loc = f"line {e.line}, col {e.character}"
            lines.append(f"  {loc:<20} {_paint(e.code, _YELLOW, color)}  {e.reason}")
            lines.append(f"    {_paint(e.scope, _GREY, color)}")
        lines.append("")

    if not result.records:
        lines.append(f"No hardcoded strings in {len(result.files)} file(s).")
    else:
        lines.append("-" * 60)
        lines.append(
            f"{len(result.records)} hardcoded string(s) in "
            f"{len(result.files_with_errors)} of {len(result.files)} file(s): "
            f"{result.count(CandidateKind.TEXT)} text, "
            f"{result.count(CandidateKind.ATTRIBUTE)} attribute"
        )

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


def render_json(result: LintResult) -> str:
    """Produce stable JSON output (records in scan order)."""
    doc: dict[str, Any] = {
        "tool": "i18n-lint",
        "version": i18nlint.__version__,
        "paths": result.paths,
        "summary": {
            "files": len(result.files),
            "files_with_errors": len(result.files_with_errors),
            "total": len(result.records),
            "text": result.count(CandidateKind.TEXT),
            "attribute": result.count(CandidateKind.ATTRIBUTE),
        },
        "errors": [r.to_dict() for r in result.records],
    }
    return json.dumps(doc, indent=2, ensure_ascii=False)
