"""Context-stack tokenizer for scopelex.

lexer/
├── __init__.py          # Re-exports Tokenizer, LexState
├── core.py              # Tokenizer (line scanning, transitions, fallback)
├── scopes.py            # Meta scope layering, capture splitting
└── state.py             # LexState resume snapshot

Usage:
    >>> from scopelex.grammars import get_grammar
    >>> from scopelex.lexer import Tokenizer
    >>> for token in Tokenizer(get_grammar("sflk"), "# hello #").tokenize():
    ...     print(token)
Token(PUSH, '#', punctuation.definition.comment.begin.sflk, 1:1)
Token(TEXT, ' hello ', comment.block.level1.sflk, 1:2)
Token(POP, '#', punctuation.definition.comment.end.sflk, 1:9)

"""

from scopelex.lexer.core import Tokenizer
from scopelex.lexer.state import LexState

__all__ = ["LexState", "Tokenizer"]
