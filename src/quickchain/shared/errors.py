"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic
"""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict
from .source_location import SourceLocation
from ..utils.config import NO_COLOR_ENV, COLOR_ENV


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set or QUICKCHAIN_COLOR is off)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get(NO_COLOR_ENV):
        return False
    explicit = os.environ.get(COLOR_ENV, "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_GREEN  = "\033[32m"
_RESET  = "\033[0m"

_LEVEL_COLORS = {"error": _RED, "note": _GREEN}

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


class ErrorCode(Enum):
    """Diagnostic codes shown in error headers"""
    LEX_ERROR = "E0001"
    SYNTAX_ERROR = "E0101"
    INVALID_QUICK = "E0102"
    INVALID_ERRORS_BLOCK = "E0103"
    INTERNAL = "E9999"


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """
    A single diagnostic.

    Rust Pattern: rustc_errors::Diagnostic

    ``related`` holds secondary diagnostics rendered after this one (the
    combined detail of a wrapped error).
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    label: Optional[str] = None
    level: str = "error"
    related: List["Error"] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a diagnostic (and its related diagnostics) in rustc style.

    Example output (plain, no color)::

        error[E0102]: invalid `quick!` entry
         --> errors.rs:3:9
          |
        3 |         quick!(NotFound, (path))
          |         ^^^^^
          |
          = help: write it as quick!(Name, "description") or quick!(Name, "description", (arg, ...))
    """
    out: List[str] = [_format_single(error, source_files, color)]
    for related in error.related:
        out.append(_format_diagnostic(related, source_files, color))
    return "\n".join(out)


def _format_single(error: Error, source_files: Dict[str, str], color: bool) -> str:
    out: List[str] = []
    level_color = _LEVEL_COLORS.get(error.level, _RED)

    # ---- header -----------------------------------------------------------
    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"{error.level}{code_str}", _BOLD, level_color, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    # ---- location arrow ---------------------------------------------------
    if error.location is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    loc = error.location

    # ---- source snippet ---------------------------------------------------
    source = source_files.get(loc.file)
    if source is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")
    gw = max(len(str(loc.line)), 1)

    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))

    idx = loc.line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    col_start = max(loc.column, 1) - 1
    if loc.end_line == loc.line and loc.end_column > loc.column:
        span_len = loc.end_column - loc.column
    else:
        span_len = _guess_span(code_line, col_start)
    carets = " " * col_start + "^" * max(1, span_len)
    label_suffix = f" {error.label}" if error.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, level_color, color=color)
    )

    _append_annotations(out, error, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ",", "(", ")", "[", "]", "{", "}"):
            break
        length += 1
    return max(1, length)


def _append_annotations(out: List[str], error: Error, gw: int, color: bool) -> None:
    if not error.help:
        return
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    pad = " " * (gw + 1)
    out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("help: ", _BOLD, color=color) + error.help)


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Error reporter with Rust-style formatting.

    Rust Pattern: rustc_errors::Emitter
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report(self, exc: "QuickchainSourceError") -> None:
        """Record a source error raised by the pipeline, keeping its related detail."""
        self.errors.append(exc.to_error())

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        if self.errors:
            print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class QuickchainError(Exception):
    """Base exception for all quickchain errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message} at {self.location}"
        return self.message


class QuickchainSourceError(QuickchainError):
    """
    Error in the input token tree or source text, rendered rustc-style.

    Errors can be combined: the combined
    errors are kept in ``related`` and rendered after this one.
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = ErrorCode.SYNTAX_ERROR.value,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code
        self.help_text = help
        self.label_text = label
        self.related: List[QuickchainSourceError] = []

    def combine(self, other: "QuickchainSourceError") -> None:
        self.related.append(other)

    def to_error(self, level: str = "error") -> Error:
        return Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            label=self.label_text,
            level=level,
            related=[r.to_error(level="note") for r in self.related],
        )

    def render(self, source_files: Optional[Dict[str, str]] = None, color: Optional[bool] = None) -> str:
        files: Dict[str, str] = dict(source_files or {})
        if self.source_code and self.location:
            files.setdefault(self.location.file, self.source_code)
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(self.to_error(), files, color=use_color)

    def __str__(self):
        return self.render(color=False)


class ParseErrorKind(Enum):
    """
    Whether a failed grammar rule may be retried with the next alternative.

    MISMATCH: the input simply is not this construct; try the next rule.
    COMMITTED: the input started as this construct and then went wrong;
    never fall back past it.
    """
    MISMATCH = "mismatch"
    COMMITTED = "committed"


class ParseError(QuickchainSourceError):
    """Grammar rule failure with source location and mismatch/committed tag"""
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 kind: ParseErrorKind = ParseErrorKind.MISMATCH,
                 construct: Optional[str] = None,
                 error_code: str = ErrorCode.SYNTAX_ERROR.value,
                 help: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location, error_code=error_code, help=help, label=label)
        self.kind = kind
        self.construct = construct

    @property
    def committed(self) -> bool:
        return self.kind is ParseErrorKind.COMMITTED

    def commit(self, construct: str) -> "ParseError":
        """Same failure, tagged so that no enclosing rule backtracks past it."""
        if self.committed:
            return self
        committed = ParseError(
            self.message,
            self.location,
            kind=ParseErrorKind.COMMITTED,
            construct=construct,
            error_code=self.error_code,
            help=self.help_text,
            label=self.label_text,
        )
        committed.related = list(self.related)
        return committed


class LexError(QuickchainSourceError):
    """Source text could not be split into a token tree"""
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location, error_code=ErrorCode.LEX_ERROR.value, source_code=source_code, label=label)


class QuickchainImplementationError(Exception):
    """
    Error in quickchain itself (not in the user's input).

    Raised for broken internal invariants, e.g. a shorthand entry that
    reached the serializer without being rewritten. Never use this for
    problems in the input - use QuickchainSourceError instead.
    """
    def __init__(self, message: str, error_code: str = ErrorCode.INTERNAL.value):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"

