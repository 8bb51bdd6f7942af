"""
Source Location (Span)

Rust Pattern: rustc_span::Span
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a token or group.

    Rust Pattern: rustc_span::Span

    - File, line, column (1-based) plus byte offsets into the source text
    - Immutable (frozen) for hashability
    - Tokens built programmatically carry no location at all (None)
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column (Rust pattern)"""
        return f"{self.file}:{self.line}:{self.column}"
