"""
Error Reporting

Exception hierarchy for template_tokens plus a rustc-style diagnostic
renderer used by the command line front end.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .source_location import SourceLocation
from ..utils.config import COLOR_ENV_VAR, NO_COLOR_ENV_VAR


class TemplateErrorCode(Enum):
    SYNTAX_ERROR = "T0001"
    UNTERMINATED = "T0002"
    MISMATCHED_CLOSING_TAG = "T0003"
    MISMATCHED_BLOCK_CLOSE = "T0004"
    UNEXPECTED_EOF = "T0005"


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get(NO_COLOR_ENV_VAR):
        return False
    explicit = os.environ.get(COLOR_ENV_VAR, "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    if explicit in ("1", "true", "yes", "always"):
        return True
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


@dataclass
class Diagnostic:
    """One reportable problem in a template source."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None


def _format_diagnostic(
    diagnostic: Diagnostic,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic.

    Example output (plain, no color)::

        error[T0003]: closing tag </Bar> does not match <Foo>
         --> app.hbs:1:6
          |
        1 | <Foo></Bar>
          |      ^^^^^^
    """
    code_str = f"[{diagnostic.code}]" if diagnostic.code else ""
    out: List[str] = [
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {diagnostic.message}", _BOLD, color=color)
    ]

    loc = diagnostic.location
    if loc is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_help(out, diagnostic, 1, color)
        return "\n".join(out)

    source = source_files.get(loc.file)
    lines = source.split("\n") if source is not None else []
    if not 0 < loc.line <= len(lines):
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))
        _append_help(out, diagnostic, 1, color)
        return "\n".join(out)

    code_line = lines[loc.line - 1]
    gw = len(str(loc.line))
    bar = _style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color)
    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    out.append(bar)
    out.append(_style(f"{loc.line} | ", _BOLD, _BLUE, color=color) + code_line)

    col_start = max(loc.column, 1) - 1
    if loc.end_line == loc.line and loc.end_column > loc.column:
        span_len = loc.end_column - loc.column
    else:
        span_len = 1
    carets = " " * col_start + "^" * span_len
    out.append(bar + " " + _style(carets, _BOLD, _RED, color=color))
    _append_help(out, diagnostic, gw, color)
    return "\n".join(out)


def _append_help(out: List[str], diagnostic: Diagnostic, gw: int, color: bool) -> None:
    if not diagnostic.help:
        return
    out.append(
        _style(f"{' ' * (gw + 1)}= ", _BOLD, _CYAN, color=color)
        + _style("help: ", _BOLD, color=color)
        + diagnostic.help
    )


class ErrorReporter:
    """Collects diagnostics across templates and renders them."""

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files: Dict[str, str] = dict(source_files or {})
        self.diagnostics: List[Diagnostic] = []

    def add_source(self, file: str, source: str) -> None:
        self.source_files[file] = source

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def report_error(self, error: "TemplateTokensError") -> None:
        """Record an exception raised while processing a template."""
        if isinstance(error, TemplateSourceError):
            if error.source_code is not None and error.location is not None:
                self.source_files.setdefault(error.location.file, error.source_code)
            self.report(Diagnostic(error.message, error.location, error.error_code, error.help_text))
        else:
            self.report(Diagnostic(error.message, error.location))

    def has_errors(self) -> bool:
        return len(self.diagnostics) > 0

    def format_all(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [_format_diagnostic(d, self.source_files, color=use_color) for d in self.diagnostics]
        count = len(self.diagnostics)
        if count:
            summary = f"{count} template{'s' if count != 1 else ''} could not be parsed"
            parts.append(
                _style("error", _BOLD, _RED, color=use_color)
                + _style(f": {summary}", _BOLD, color=use_color)
            )
        return "\n\n".join(parts)


# ============================================================================
# Exception Classes
# ============================================================================

class TemplateTokensError(Exception):
    """Base exception for all template_tokens errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n --> {self.location}"
        return self.message


class TemplateSourceError(TemplateTokensError):
    """
    Error in template source text with rich rustc-style formatting.

    Use this for any error caused by the user's template, never for bugs
    in the extractor itself.
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = TemplateErrorCode.SYNTAX_ERROR.value,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code
        self.help_text = help

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code is not None and self.location:
            source_files[self.location.file] = self.source_code
        diagnostic = Diagnostic(self.message, self.location, self.error_code, self.help_text)
        return _format_diagnostic(diagnostic, source_files, color=False)


class TemplateSyntaxError(TemplateSourceError):
    """The template could not be parsed; no tokens are produced for it."""


class ScopeUnderflowError(TemplateTokensError):
    """Raised when popping a block-parameter frame from an empty scope."""

    def __init__(self) -> None:
        super().__init__("cannot pop scope: no block-parameter frame is active")
