"""Grammar model and loader.

A grammar is a table of named contexts, each an ordered list of rules.
Rules match text, assign scopes, and push or pop contexts.

Usage:
    >>> from scopelex.grammar import load_grammar
    >>> grammar = load_grammar({"contexts": {"main": [{"match": "x", "scope": "letter.x"}]}})
    >>> grammar.entry.name
    'main'

"""

from scopelex.grammar.loader import load_grammar, load_grammar_file
from scopelex.grammar.model import ENTRY_CONTEXT, Context, Grammar, Include, Rule

__all__ = [
    "ENTRY_CONTEXT",
    "Context",
    "Grammar",
    "Include",
    "Rule",
    "load_grammar",
    "load_grammar_file",
]
