"""Resumable lexer state.

A LexState is everything needed, together with the Grammar, to resume
tokenizing: the context stack plus the absolute position (offset, line and
column) where the next unprocessed text begins. That is usually a line
start, or a token boundary inside a line when a pass stopped mid-line.

Thread Safety:
LexState is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

from scopelex.errors import StateError
from scopelex.grammar.model import ENTRY_CONTEXT, Grammar


@dataclass(frozen=True, slots=True)
class LexState:
    """Snapshot of the context stack at a resume point.

    Attributes:
        stack: Active context names, bottom (entry context) first
        offset: Absolute offset of the resume point in the full document
        lineno: Line number of that offset (1-indexed)
        col: Column of that offset (1-indexed; 1 at a line start)

    Example:
        >>> state = LexState()
        >>> state.top, state.depth
        ('main', 1)
    """

    stack: tuple[str, ...] = (ENTRY_CONTEXT,)
    offset: int = 0
    lineno: int = 1
    col: int = 1

    @property
    def top(self) -> str:
        return self.stack[-1]

    @property
    def depth(self) -> int:
        return len(self.stack)

    def validate(self, grammar: Grammar) -> None:
        """Check this state can drive a tokenizer for grammar.

        Raises:
            StateError: If the stack is empty, does not start at the entry
                context, or names a context the grammar lacks.
        """
        if not self.stack:
            raise StateError("lexer state has an empty stack")
        if self.stack[0] != ENTRY_CONTEXT:
            raise StateError(f"lexer state must start at {ENTRY_CONTEXT!r}", self.stack)
        missing = [name for name in self.stack if name not in grammar]
        if missing:
            raise StateError(f"unknown contexts {missing!r} for grammar {grammar.name!r}", self.stack)
        if self.offset < 0 or self.lineno < 1 or self.col < 1:
            raise StateError(
                f"invalid position offset={self.offset} lineno={self.lineno} col={self.col}"
            )

    def same_stack(self, other: LexState) -> bool:
        """True when both states would tokenize the next line identically."""
        return self.stack == other.stack
