"""
Tests for diagnostics: rustc-style rendering of template errors and the
multi-file ErrorReporter used by the command line.
"""

import re

from template_tokens.shared.errors import (
    Diagnostic, ErrorReporter, TemplateErrorCode, TemplateSourceError, TemplateSyntaxError,
    TemplateTokensError,
)
from template_tokens.shared.source_location import SourceLocation

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


class TestErrorReporterProblematic:
    """Problematic/edge cases for the diagnostic formatter."""

    def test_location_none(self):
        reporter = ErrorReporter({})
        reporter.report(Diagnostic("something failed", None, "T0001"))
        out = reporter.format_all(color=False)
        assert "error[T0001]: something failed" in out
        assert "unknown location" in out

    def test_file_not_in_source_files(self):
        reporter = ErrorReporter({})
        reporter.report(Diagnostic("oops", SourceLocation("missing.hbs", 1, 1), "T0003"))
        out = reporter.format_all(color=False)
        assert "error[T0003]" in out
        assert "missing.hbs:1:1" in out

    def test_line_beyond_source(self):
        reporter = ErrorReporter({"x.hbs": "<div>\n</div>\n"})
        reporter.report(Diagnostic("bad", SourceLocation("x.hbs", 10, 1)))
        out = reporter.format_all(color=False)
        assert " --> x.hbs:10:1" in out
        assert "10 |" not in out

    def test_span_underlined(self):
        loc = SourceLocation("f.hbs", 1, 6, 5, 11, 1, 12)
        reporter = ErrorReporter({"f.hbs": "<Foo></Bar>"})
        reporter.report(Diagnostic("mismatch", loc, "T0003", help="close the element with </Foo>"))
        lines = reporter.format_all(color=False).split("\n")
        assert lines[0] == "error[T0003]: mismatch"
        assert lines[1] == " --> f.hbs:1:6"
        assert lines[3] == "1 | <Foo></Bar>"
        assert lines[4] == "  |      ^^^^^^"
        assert lines[5] == "  = help: close the element with </Foo>"

    def test_color_output(self):
        reporter = ErrorReporter({})
        reporter.report(Diagnostic("boom", None, "T0001"))
        out = reporter.format_all(color=True)
        assert "\x1b[" in out
        assert "error[T0001]" in _strip_ansi(out)

    def test_color_env(self, monkeypatch):
        reporter = ErrorReporter({})
        reporter.report(Diagnostic("boom", None))
        monkeypatch.setenv("NO_COLOR", "1")
        assert "\x1b[" not in reporter.format_all()
        monkeypatch.delenv("NO_COLOR")
        monkeypatch.setenv("TEMPLATE_TOKENS_COLOR", "always")
        assert "\x1b[" in reporter.format_all()


class TestErrorReporter:

    def test_summary(self):
        reporter = ErrorReporter()
        assert not reporter.has_errors()
        assert reporter.format_all(color=False) == ""
        reporter.report(Diagnostic("a", None))
        assert reporter.format_all(color=False).endswith("error: 1 template could not be parsed")
        reporter.report(Diagnostic("b", None))
        assert reporter.has_errors()
        assert reporter.format_all(color=False).endswith("error: 2 templates could not be parsed")

    def test_report_error_keeps_source(self):
        error = TemplateSyntaxError(
            "unexpected end of template", SourceLocation("a.hbs", 1, 9, 8, 8),
            TemplateErrorCode.UNEXPECTED_EOF.value, source_code="{{#foo}}",
        )
        reporter = ErrorReporter()
        reporter.report_error(error)
        out = reporter.format_all(color=False)
        assert "error[T0005]: unexpected end of template" in out
        assert "1 | {{#foo}}" in out

    def test_report_plain_error(self):
        reporter = ErrorReporter()
        reporter.report_error(TemplateTokensError("internal"))
        assert "error: internal" in reporter.format_all(color=False)


class TestExceptions:

    def test_hierarchy(self):
        assert issubclass(TemplateSyntaxError, TemplateSourceError)
        assert issubclass(TemplateSourceError, TemplateTokensError)

    def test_plain_str(self):
        error = TemplateTokensError("bad thing", SourceLocation("t.hbs", 2, 4))
        assert str(error) == "bad thing\n --> t.hbs:2:4"
        assert str(TemplateTokensError("bad thing")) == "bad thing"

    def test_source_error_defaults(self):
        error = TemplateSourceError("bad")
        assert error.error_code == TemplateErrorCode.SYNTAX_ERROR.value
        assert error.help_text is None
        assert str(error).startswith("error[T0001]: bad")
