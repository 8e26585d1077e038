"""Bundled grammars.

Grammars are stored as plain data and loaded (validated and compiled) on
first use. Loaded grammars are immutable, so one instance per name is
shared by every caller.

Usage:
    >>> from scopelex.grammars import get_grammar
    >>> grammar = get_grammar("sflk")
    >>> grammar.scope
    'source.sflk'

Thread Safety:
Concurrent first calls may each load the grammar; all results are
equivalent and the cache keeps one of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import cache
from typing import Any

from scopelex.errors import GrammarError
from scopelex.grammar.loader import load_grammar
from scopelex.grammar.model import Grammar
from scopelex.grammars.sflk import SFLK_GRAMMAR

# Registry of built-in grammar data
BUILTIN_GRAMMARS: dict[str, Mapping[str, Any]] = {
    "sflk": SFLK_GRAMMAR,
}


def get_grammar(name: str) -> Grammar:
    """Get a loaded built-in grammar by name.

    Args:
        name: Grammar name (e.g., "sflk"), case-insensitive

    Returns:
        Shared, immutable Grammar instance

    Raises:
        GrammarError: If the name is not recognized

    """
    key = name.lower()
    if key not in BUILTIN_GRAMMARS:
        available = ", ".join(sorted(BUILTIN_GRAMMARS))
        raise GrammarError(f"Unknown grammar: {name!r}. Available: {available}")
    return _load_builtin(key)


@cache
def _load_builtin(key: str) -> Grammar:
    return load_grammar(BUILTIN_GRAMMARS[key])


__all__ = [
    "BUILTIN_GRAMMARS",
    "SFLK_GRAMMAR",
    "get_grammar",
]
