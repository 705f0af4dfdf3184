"""Tests for i18nlint.models."""

import pytest

from i18nlint.models import (
    CandidateKind,
    ErrorRecord,
    Evidence,
    InvalidArgumentError,
    LintError,
    LintResult,
    PositionNotFoundError,
)


def make_error(line=1, character=1, code="W001", reason="Hardcoded <p> tag", literal="Hi"):
    return LintError(
        id="(error)",
        code=code,
        reason=reason,
        evidence=Evidence(literal),
        line=line,
        character=character,
        scope=f"<p>{literal}</p>",
    )


class TestEvidence:
    def test_pattern_escapes(self):
        assert Evidence("a.b (c)").pattern == r"a\.b\ \(c\)"

    def test_compile_matches_literal(self):
        ev = Evidence("$5.00 [x]")
        assert ev.compile().search("costs $5.00 [x] now").group() == "$5.00 [x]"

    def test_equality_by_literal(self):
        assert Evidence("Hi") == Evidence("Hi")
        assert Evidence("Hi") != Evidence("hi")

    def test_str(self):
        assert str(Evidence("a.b")) == r"/a\.b/"


class TestLintError:
    def test_continuation(self):
        assert make_error(reason="Hardcoded <p> tag (continued)").is_continuation
        assert not make_error().is_continuation

    def test_sort_key(self):
        errors = [make_error(3, 1), make_error(1, 9), make_error(1, 2)]
        ordered = sorted(errors, key=lambda e: e.sort_key())
        assert [(e.line, e.character) for e in ordered] == [(1, 2), (1, 9), (3, 1)]


class TestErrorRecord:
    def test_to_dict(self):
        record = ErrorRecord(file="a.html", error=make_error(2, 5, literal="a.b"))
        assert record.to_dict() == {
            "file": "a.html",
            "error": {
                "id": "(error)",
                "code": "W001",
                "reason": "Hardcoded <p> tag",
                "evidence": r"a\.b",
                "line": 2,
                "character": 5,
                "scope": "<p>a.b</p>",
            },
        }


class TestLintResult:
    def test_counts(self):
        result = LintResult(paths=["."], files=["a.html", "b.html", "c.html"])
        result.records = [
            ErrorRecord("a.html", make_error()),
            ErrorRecord("a.html", make_error(code="W002", reason="Hardcoded 'alt' attribute")),
            ErrorRecord("c.html", make_error()),
        ]
        assert result.count(CandidateKind.TEXT) == 2
        assert result.count(CandidateKind.ATTRIBUTE) == 1
        assert result.files_with_errors == ["a.html", "c.html"]

    def test_empty(self):
        result = LintResult()
        assert result.files_with_errors == []
        assert result.count(CandidateKind.TEXT) == 0


class TestExceptions:
    def test_invalid_argument_is_type_error(self):
        with pytest.raises(TypeError):
            raise InvalidArgumentError("path must be defined")

    def test_position_not_found(self):
        err = PositionNotFoundError("Hello", 12)
        assert isinstance(err, LookupError)
        assert err.value == "Hello"
        assert err.offset == 12
        assert "Hello" in str(err)
