"""i18n-lint — find hardcoded, untranslated text in HTML templates."""

from i18nlint.config import LintOptions
from i18nlint.models import (
    ErrorRecord,
    Evidence,
    I18nLintError,
    InvalidArgumentError,
    LintError,
    PositionNotFoundError,
)
from i18nlint.scanner.scanner import lint, scan_text

__version__ = "0.1.0"

__all__ = [
    "ErrorRecord",
    "Evidence",
    "I18nLintError",
    "InvalidArgumentError",
    "LintError",
    "LintOptions",
    "PositionNotFoundError",
    "lint",
    "scan_text",
]
