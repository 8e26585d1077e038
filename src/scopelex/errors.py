"""Exception classes for scopelex.

Provides standardized exceptions for error handling throughout scopelex.
Tokenizing itself never raises once a grammar has loaded; recoverable
problems in source text are reported as diagnostics instead
(see scopelex.diagnostics).
"""

from __future__ import annotations


class ScopelexError(Exception):
    """Base exception for all scopelex errors.

    Subclass this for specific error categories.
    """

    pass


class GrammarError(ScopelexError):
    """Error while loading or validating a grammar.

    Raised before any tokenizing begins when grammar data references a
    context that does not exist, lacks the entry context, carries an
    invalid regular expression, or is otherwise malformed.
    """

    def __init__(
        self,
        message: str,
        grammar: str | None = None,
        context: str | None = None,
        rule_index: int | None = None,
    ) -> None:
        """Initialize grammar error with optional location in the grammar.

        Args:
            message: Error description
            grammar: Grammar name (optional)
            context: Context the offending item belongs to (optional)
            rule_index: Index of the offending item within its context (optional)
        """
        self.message = message
        self.grammar = grammar
        self.context = context
        self.rule_index = rule_index

        location = ""
        if grammar:
            location = f"{grammar}:"
        if context is not None:
            location += f"{context}:"
            if rule_index is not None:
                location += f"{rule_index}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class StateError(ScopelexError):
    """Error when a lexer state cannot be resumed against a grammar.

    Raised when a snapshot names a context the grammar does not define,
    or when its bottom frame is not the entry context.
    """

    def __init__(self, message: str, stack: tuple[str, ...] = ()) -> None:
        """Initialize state error.

        Args:
            message: Description of the problem
            stack: The offending context stack (bottom first)
        """
        self.stack = stack
        detail = f" (stack: {' > '.join(stack)})" if stack else ""
        super().__init__(f"{message}{detail}")
