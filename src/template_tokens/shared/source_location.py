"""
Source Location (Span)

Line/column span of a node or token inside one template source.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a template construct.

    - File, 1-based line and column, plus character offsets into the source
    - Code snippets are extracted from the source when needed (not stored here)
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
