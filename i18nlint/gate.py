"""Gate — exit codes for the CLI."""

from __future__ import annotations

from i18nlint.models import LintResult

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def decide(result: LintResult, warn_only: bool = False) -> int:
    """Return the exit code for *result*.

    Exit codes:
        0 — clean, or findings reported with ``warn_only``
        1 — hardcoded strings found
    """
    if warn_only or not result.records:
        return EXIT_OK
    return EXIT_FINDINGS
