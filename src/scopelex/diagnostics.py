"""Non-fatal diagnostics reported while tokenizing.

Highlighting must never block editing, so problems in source text are
recorded here instead of raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnosticKind(Enum):
    """Categories of recoverable tokenizing problems."""

    UNEXPECTED_CHARACTER = "unexpected-character"  # No rule matched
    UNBALANCED_POP = "unbalanced-pop"  # Pop with only the entry context left
    UNTERMINATED_CONTEXT = "unterminated-context"  # EOF inside a pushed context
    ZERO_WIDTH_LOOP = "zero-width-loop"  # Zero-width transitions cycled in place
    LINE_TOO_LONG = "line-too-long"  # Line exceeded max_line_length


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recoverable problem found at a position in the source.

    Attributes:
        kind: Diagnostic category
        message: Human-readable description
        offset: Absolute offset of the problem
        lineno: Line number (1-indexed)
        col: Column (1-indexed)
        context: Context on top of the stack when it happened
    """

    kind: DiagnosticKind
    message: str
    offset: int
    lineno: int
    col: int
    context: str = "main"

    def __str__(self) -> str:
        return f"{self.lineno}:{self.col}: {self.kind.value}: {self.message}"
