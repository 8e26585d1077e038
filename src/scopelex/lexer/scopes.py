"""Scope layering and capture splitting.

Pure functions: no tokenizer state is touched here.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from scopelex.grammar.model import Context, Rule


def context_scopes(contexts: Sequence[Context], *, delimiter: bool = False) -> tuple[str, ...]:
    """Meta scopes contributed by a stack of contexts, bottom first.

    When ``delimiter`` is set the innermost context contributes only its
    meta_scope: its meta_content_scope does not cover its own begin and end
    tokens.
    """
    scopes: list[str] = []
    last = len(contexts) - 1
    for i, context in enumerate(contexts):
        if context.meta_scope:
            scopes.append(context.meta_scope)
        if context.meta_content_scope and not (delimiter and i == last):
            scopes.append(context.meta_content_scope)
    return tuple(scopes)


def split_match(
    match: re.Match[str],
    rule: Rule,
    base: tuple[str, ...],
) -> list[tuple[int, int, tuple[str, ...]]]:
    """Split a match into (start, end, scopes) pieces along capture groups.

    Pieces are relative to the string the match was made against, cover
    the match exactly, and are in order. Each piece carries ``base``, the
    rule scope, then the scopes of every capture group covering it with
    outer groups first. Groups that did not participate or matched empty
    text contribute nothing; groups reaching outside the match (inside a
    lookaround) are clipped to it.
    """
    start, end = match.span()
    scoped = (*base, rule.scope) if rule.scope else base
    if not rule.captures:
        return [(start, end, scoped)]

    groups: list[tuple[int, int, int, str]] = []
    for group, scope in rule.captures:
        g_start, g_end = match.span(group)
        g_start, g_end = max(g_start, start), min(g_end, end)
        if g_start < g_end:
            groups.append((g_start, g_end, group, scope))
    if not groups:
        return [(start, end, scoped)]

    # Outer first: earlier start, then longer, then lower group number
    groups.sort(key=lambda g: (g[0], -g[1], g[2]))
    cuts = sorted({start, end, *(g[0] for g in groups), *(g[1] for g in groups)})

    pieces = []
    for left, right in zip(cuts, cuts[1:]):
        extra = tuple(g[3] for g in groups if g[0] <= left and right <= g[1])
        pieces.append((left, right, scoped + extra))
    return pieces
