"""HTML rendering of token streams.

Scopes are opaque to the tokenizer; this module gives them one concrete
use: CSS classes. Each scope becomes one class with dots replaced by
hyphens, so a stylesheet can target ``.comment-block-level1-sflk`` or
use attribute selectors such as ``[class^="comment-"]``.

Usage:
    >>> from scopelex.grammars import get_grammar
    >>> from scopelex.highlighting import highlight
    >>> highlight("pr 1", get_grammar("sflk"), include_root=False)
    '<span class="keyword-other-sflk">pr</span> <span class="constant-numeric-integer-sflk">1</span>'

"""

from __future__ import annotations

from collections.abc import Iterable
from html import escape

from scopelex.grammar.model import Grammar
from scopelex.lexer import Tokenizer
from scopelex.tokens import Token, TokenKind


def scope_class(scope: str) -> str:
    """CSS class name for a scope ("comment.block.sflk" -> "comment-block-sflk")."""
    return scope.replace(".", "-")


def render_html(
    tokens: Iterable[Token],
    *,
    root_scope: str | None = None,
    mark_fallback: bool = True,
) -> str:
    """Render tokens to HTML spans.

    Args:
        tokens: Tokens in source order
        root_scope: Scope to leave out of class lists (usually the grammar
            scope, which would otherwise appear on every span)
        mark_fallback: Add a ``fallback`` class to unmatched characters and
            an ``invalid`` class to unbalanced pops

    Returns:
        HTML fragment. Text is escaped; tokens without scopes are bare text.
    """
    parts: list[str] = []
    for token in tokens:
        classes = [scope_class(s) for s in token.scopes if s != root_scope]
        if mark_fallback:
            if token.kind is TokenKind.FALLBACK:
                classes.append("fallback")
            elif token.kind is TokenKind.INVALID:
                classes.append("invalid")
        text = escape(token.value, quote=False)
        if classes:
            parts.append(f'<span class="{" ".join(classes)}">{text}</span>')
        else:
            parts.append(text)
    return "".join(parts)


def highlight(source: str, grammar: Grammar, *, include_root: bool = True) -> str:
    """Tokenize and render source in one call.

    Args:
        source: Text to highlight
        grammar: Loaded grammar
        include_root: Keep the grammar scope as a class on every span

    Returns:
        HTML fragment (never raises for any input text).
    """
    root = None if include_root else grammar.scope
    return render_html(Tokenizer(grammar, source).tokenize(), root_scope=root)
