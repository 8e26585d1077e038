"""Token and TokenKind definitions for the scopelex tokenizer.

The tokenizer produces a stream of Token objects that a host highlighting
engine consumes. Each Token has a span, its text, the stack of scopes that
apply to it, and a kind describing how it was produced.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenKind is an enum (inherently immutable).

Performance Note:
Token stores raw coordinates and lazily creates SourceLocation on demand.
Hosts that only need offsets never pay for location objects.

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scopelex.location import SourceLocation


class TokenKind(Enum):
    """How a token was produced.

    - TEXT: matched by a rule without a transition
    - PUSH: matched by a rule that entered a context (begin delimiter)
    - POP: matched by a rule that left a context (end delimiter)
    - FALLBACK: no rule matched; a single character was consumed
    - INVALID: a pop that had no context to leave

    """

    TEXT = auto()
    PUSH = auto()
    POP = auto()
    FALLBACK = auto()
    INVALID = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A categorized span of source text.

    Attributes:
        kind: How the token was produced (from TokenKind enum)
        value: The raw text of the span
        start: Absolute start offset in source
        end: Absolute end offset in source (exclusive)
        scopes: Scope names, outermost first. The grammar scope comes
            first, then meta scopes of enclosing contexts, then the rule
            scope and capture scopes.
        _lineno: Line number (1-indexed)
        _col: Column of start (1-indexed)
        _source_file: Optional source file path

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.
        The lazy cache uses idempotent write (safe for concurrent access).

    """

    kind: TokenKind
    value: str
    start: int
    end: int
    scopes: tuple[str, ...] = ()
    _lineno: int = 1
    _col: int = 1
    _source_file: str | None = None
    _location_cache: SourceLocation | None = field(
        default=None, repr=False, compare=False, hash=False
    )

    @property
    def location(self) -> SourceLocation:
        """Get source location (lazily created and cached).

        Tokens never span a line break, so start and end share a line.
        """
        if self._location_cache is not None:
            return self._location_cache

        # Import here to avoid circular import at module load
        from scopelex.location import SourceLocation

        loc = SourceLocation(
            lineno=self._lineno,
            col_offset=self._col,
            offset=self.start,
            end_offset=self.end,
            end_lineno=self._lineno,
            end_col_offset=self._col + (self.end - self.start),
            source_file=self._source_file,
        )
        object.__setattr__(self, "_location_cache", loc)
        return loc

    @property
    def scope(self) -> str | None:
        """Innermost (most specific) scope, or None for an unscoped token."""
        return self.scopes[-1] if self.scopes else None

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self._lineno

    @property
    def col(self) -> int:
        """Column offset (convenience accessor)."""
        return self._col

    def shifted(self, offset_delta: int, line_delta: int = 0) -> Token:
        """Return a copy moved by offset_delta characters and line_delta lines."""
        if offset_delta == 0 and line_delta == 0:
            return self
        return replace(
            self,
            start=self.start + offset_delta,
            end=self.end + offset_delta,
            _lineno=self._lineno + line_delta,
            _location_cache=None,
        )

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.kind.name}, {val!r}, {self.scope}, {self._lineno}:{self._col})"
