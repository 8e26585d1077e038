"""TokenizeAccumulator: opt-in profiling for tokenizing passes.

This module provides accumulated metrics during tokenizing:
- Total elapsed time
- Lines and tokens produced
- Fallback characters (input no rule matched)

Zero overhead when disabled (get_tokenize_accumulator() returns None).

Example:
    from scopelex import tokenize
    from scopelex.profiling import profiled_tokenize

    with profiled_tokenize() as metrics:
        tokens = list(tokenize(source, grammar))

    print(metrics.summary())
    # {"total_ms": 0.4, "passes": 1, "lines": 12, "tokens": 80, "fallbacks": 0}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class TokenizeAccumulator:
    """Accumulated metrics over tokenizing passes.

    Attributes:
        start_time: Profiling start timestamp.
        passes: Number of completed tokenizing passes.
        lines: Lines tokenized.
        tokens: Tokens emitted.
        fallbacks: Fallback tokens emitted.

    """

    start_time: float = field(default_factory=perf_counter)
    passes: int = 0
    lines: int = 0
    tokens: int = 0
    fallbacks: int = 0

    def record_pass(self, lines: int, tokens: int, fallbacks: int) -> None:
        """Record a completed tokenizing pass."""
        self.passes += 1
        self.lines += lines
        self.tokens += tokens
        self.fallbacks += fallbacks

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of tokenize metrics."""
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "passes": self.passes,
            "lines": self.lines,
            "tokens": self.tokens,
            "fallbacks": self.fallbacks,
        }


_accumulator: ContextVar[TokenizeAccumulator | None] = ContextVar(
    "tokenize_accumulator",
    default=None,
)


def get_tokenize_accumulator() -> TokenizeAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_tokenize() -> Iterator[TokenizeAccumulator]:
    """Context manager for profiled tokenizing.

    Creates a TokenizeAccumulator and makes it available via
    get_tokenize_accumulator() for the duration of the with block.
    Only passes that run to completion inside the block are recorded.

    Yields:
        TokenizeAccumulator populated as passes finish.

    """
    acc = TokenizeAccumulator()
    token: Token[TokenizeAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)
