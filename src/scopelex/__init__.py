"""
scopelex — Grammar-driven tokenizer with a context stack

Turns source text into a lazy stream of scoped tokens for syntax
highlighting. A grammar is a table of named contexts; each context is an
ordered list of regular-expression rules that assign scopes and push or
pop contexts. The first matching rule wins.

Quick Start:
    >>> from scopelex import get_grammar, tokenize
    >>> for token in tokenize("(1+2)", get_grammar("sflk")):
    ...     print(token.value, token.scope)
    ( punctuation.section.group.begin.sflk
    1 constant.numeric.integer.sflk
    + keyword.operator.arithmetic.sflk
    2 constant.numeric.integer.sflk
    ) punctuation.section.group.end.sflk

Custom grammars:
    >>> from scopelex import load_grammar
    >>> grammar = load_grammar({
    ...     "scope": "source.demo",
    ...     "contexts": {"main": [{"match": "[0-9]+", "scope": "constant.numeric"}]},
    ... })

Incremental re-lexing:
    >>> from scopelex import retokenize, tokenize_document
    >>> doc = tokenize_document(source, grammar)
    >>> doc = retokenize(new_source, doc, grammar, edit_start, edit_end, new_length)

"""

from collections.abc import Iterator

from scopelex.cache import DictTokenCache, TokenCache, hash_content, hash_settings
from scopelex.config import (
    TokenizeConfig,
    get_tokenize_config,
    reset_tokenize_config,
    set_tokenize_config,
    tokenize_config_context,
)
from scopelex.diagnostics import Diagnostic, DiagnosticKind
from scopelex.document import TokenizedDocument, tokenize_document
from scopelex.errors import GrammarError, ScopelexError, StateError
from scopelex.grammar import (
    ENTRY_CONTEXT,
    Context,
    Grammar,
    Include,
    Rule,
    load_grammar,
    load_grammar_file,
)
from scopelex.grammars import BUILTIN_GRAMMARS, get_grammar
from scopelex.highlighting import highlight, render_html
from scopelex.incremental import retokenize
from scopelex.lexer import LexState, Tokenizer
from scopelex.location import SourceLocation
from scopelex.profiling import TokenizeAccumulator, get_tokenize_accumulator, profiled_tokenize
from scopelex.serialization import from_dict, from_json, to_dict, to_json
from scopelex.tokens import Token, TokenKind

__version__ = "0.1.0"


def tokenize(
    source: str,
    grammar: Grammar,
    *,
    state: LexState | None = None,
    source_file: str | None = None,
) -> Iterator[Token]:
    """Tokenize source text with a grammar.

    Args:
        source: Text to tokenize
        grammar: Loaded grammar (see load_grammar / get_grammar)
        state: Optional LexState to resume from; ``source`` must then be the
            text starting at ``state.offset``
        source_file: Optional source file path for token locations

    Returns:
        Lazy iterator of Tokens covering ``source`` exactly.

    Raises:
        StateError: If ``state`` does not fit ``grammar`` (raised immediately,
            not on first iteration).

    Example:
        >>> [t.value for t in tokenize("# hello #", get_grammar("sflk"))]
        ['#', ' hello ', '#']
    """
    return Tokenizer(grammar, source, state=state, source_file=source_file).tokenize()


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "tokenize",
    "tokenize_document",
    "retokenize",
    "highlight",
    "render_html",
    # Grammar
    "ENTRY_CONTEXT",
    "Context",
    "Grammar",
    "Include",
    "Rule",
    "load_grammar",
    "load_grammar_file",
    "BUILTIN_GRAMMARS",
    "get_grammar",
    # Tokenizer components
    "Tokenizer",
    "LexState",
    "Token",
    "TokenKind",
    "TokenizedDocument",
    "SourceLocation",
    # Diagnostics and errors
    "Diagnostic",
    "DiagnosticKind",
    "ScopelexError",
    "GrammarError",
    "StateError",
    # Token cache
    "DictTokenCache",
    "TokenCache",
    "hash_content",
    "hash_settings",
    # Configuration (ContextVar-based)
    "TokenizeConfig",
    "get_tokenize_config",
    "set_tokenize_config",
    "reset_tokenize_config",
    "tokenize_config_context",
    # Profiling
    "TokenizeAccumulator",
    "profiled_tokenize",
    "get_tokenize_accumulator",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
]
