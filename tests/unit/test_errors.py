#!/usr/bin/env python3
"""
Tests for diagnostics: error codes, combining, rustc-style rendering.
"""

import pytest
from quickchain.shared.errors import (
    Error, ErrorCode, ErrorReporter, LexError, ParseError, ParseErrorKind,
    QuickchainError, QuickchainImplementationError, QuickchainSourceError,
)
from quickchain.shared.source_location import SourceLocation
from tests.test_utils import strip_ansi

SOURCE = 'errors {\n    quick!(NotFound, 42)\n}'
LOC = SourceLocation("errors.rs", 2, 22, end_line=2, end_column=24)


class TestParseError:

    def test_default_is_mismatch(self):
        error = ParseError("expected `,`")
        assert error.kind is ParseErrorKind.MISMATCH
        assert not error.committed
        assert error.construct is None

    def test_commit_copies(self):
        error = ParseError("expected `,`", LOC, help="add a comma")
        committed = error.commit("quick!")
        assert committed is not error
        assert committed.committed
        assert committed.construct == "quick!"
        assert committed.location == LOC
        assert committed.help_text == "add a comma"
        assert not error.committed

    def test_commit_is_idempotent(self):
        committed = ParseError("x").commit("quick!")
        assert committed.commit("errors") is committed
        assert committed.construct == "quick!"

    def test_hierarchy(self):
        assert issubclass(ParseError, QuickchainSourceError)
        assert issubclass(LexError, QuickchainError)
        assert not issubclass(QuickchainImplementationError, QuickchainError)


class TestRendering:

    def _wrapped(self):
        outer = QuickchainSourceError(
            "invalid `quick!` entry", LOC,
            error_code=ErrorCode.INVALID_QUICK.value,
            source_code=SOURCE,
            help='write it as quick!(Name, "description")',
        )
        outer.combine(ParseError("expected string literal, found literal `42`", LOC))
        return outer

    def test_render_plain(self):
        text = self._wrapped().render(color=False)
        lines = text.split("\n")
        assert lines[0] == "error[E0102]: invalid `quick!` entry"
        assert lines[1] == " --> errors.rs:2:22"
        assert lines[3] == "2 |     quick!(NotFound, 42)"
        assert lines[4] == "  | " + " " * 21 + "^^"
        assert '  = help: write it as quick!(Name, "description")' in lines
        assert "note[E0101]: expected string literal, found literal `42`" in lines

    def test_str_has_no_color(self):
        assert "\x1b[" not in str(self._wrapped())

    def test_render_color(self):
        text = self._wrapped().render(color=True)
        assert "\x1b[" in text
        assert strip_ansi(text) == self._wrapped().render(color=False)

    def test_no_location(self):
        text = QuickchainSourceError("unexpected end of input").render(color=False)
        assert text.split("\n")[:2] == ["error[E0101]: unexpected end of input", " --> <unknown location>"]

    def test_unknown_file(self):
        text = ParseError("boom", SourceLocation("other.rs", 1, 1)).render(color=False)
        assert " --> other.rs:1:1" in text

    def test_guessed_span(self):
        loc = SourceLocation("errors.rs", 2, 5)
        text = QuickchainSourceError("x", loc, source_code=SOURCE).render(color=False)
        assert "  | " + " " * 4 + "^^^^^^" in text.split("\n")


class TestErrorReporter:

    def test_report_and_summary(self, no_color):
        reporter = ErrorReporter({"errors.rs": SOURCE})
        error = ParseError("invalid `errors` block", LOC, error_code=ErrorCode.INVALID_ERRORS_BLOCK.value)
        error.combine(ParseError("`errors` block must declare at least one error", LOC))
        reporter.report(error)
        assert reporter.has_errors()
        assert reporter.errors[0].related[0].level == "note"
        text = reporter.format_all_errors()
        assert text.startswith("error[E0103]: invalid `errors` block")
        assert text.endswith("error: aborting due to 1 previous error")

    def test_plural_summary_and_label(self):
        reporter = ErrorReporter({"errors.rs": SOURCE})
        reporter.report(LexError("first", None))
        reporter.report(LexError("second", LOC, label="not a valid token"))
        text = reporter.format_all_errors(color=False)
        assert "error[E0001]: second" in text
        assert "  | " + " " * 21 + "^^ not a valid token" in text.split("\n")
        assert text.endswith("aborting due to 2 previous errors")

    def test_color_env(self, monkeypatch):
        reporter = ErrorReporter({})
        reporter.report(ParseError("a"))
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("QUICKCHAIN_COLOR", "never")
        assert "\x1b[" not in reporter.format_all_errors()
        monkeypatch.setenv("QUICKCHAIN_COLOR", "always")
        assert "\x1b[" in reporter.format_all_errors()

    def test_error_dataclass_defaults(self):
        error = Error("m", None)
        assert error.level == "error"
        assert error.related == []


class TestImplementationError:

    def test_str(self):
        assert str(QuickchainImplementationError("broken")) == "[E9999] broken"
