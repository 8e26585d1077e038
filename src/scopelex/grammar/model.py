"""Immutable grammar model: rules, contexts, and the grammar table.

Contexts never own each other. The Grammar owns every context in one
mapping and contexts refer to each other by name, so cyclic references
(main pushes comment, comment pushes comment) need no special handling.

Thread Safety:
All classes are frozen dataclasses. A loaded Grammar is shared read-only
between any number of concurrent tokenizing passes.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

ENTRY_CONTEXT = "main"


@dataclass(frozen=True, slots=True)
class Rule:
    """A single match rule.

    Attributes:
        pattern: Compiled regular expression, tried anchored at the cursor
        scope: Scope for the whole match (None = only enclosing meta scopes)
        captures: Capture group index -> scope, layered on top of ``scope``
        push: Name of a context to enter after the match
        pop: Leave the current context after the match
    """

    pattern: re.Pattern[str]
    scope: str | None = None
    captures: tuple[tuple[int, str], ...] = ()
    push: str | None = None
    pop: bool = False

    @property
    def has_transition(self) -> bool:
        return self.push is not None or self.pop

    def __repr__(self) -> str:
        action = f" push={self.push}" if self.push else " pop" if self.pop else ""
        return f"Rule({self.pattern.pattern!r}, {self.scope}{action})"


@dataclass(frozen=True, slots=True)
class Include:
    """Placeholder splicing another context's rules in at its position."""

    context: str


@dataclass(frozen=True, slots=True)
class Context:
    """A named, ordered rule set.

    Attributes:
        name: Context name (lookup key in the Grammar)
        items: Rules and includes in declaration order
        meta_scope: Scope for every token while active, delimiters included
        meta_content_scope: Scope for tokens inside the context only
    """

    name: str
    items: tuple[Rule | Include, ...] = ()
    meta_scope: str | None = None
    meta_content_scope: str | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Grammar:
    """A loaded, validated grammar.

    Use scopelex.grammar.load_grammar() to build one; it resolves includes
    into ``rules`` so the tokenizer never walks include chains.

    Attributes:
        contexts: Context name -> Context
        rules: Context name -> flattened rule tuple (includes spliced in)
        name: Human-readable grammar name
        scope: Root scope applied to every token (e.g. "source.sflk")
        fingerprint: Stable hash of the source data, for cache keys
    """

    contexts: Mapping[str, Context]
    rules: Mapping[str, tuple[Rule, ...]]
    name: str = ""
    scope: str | None = None
    fingerprint: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "contexts", MappingProxyType(dict(self.contexts)))
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    @property
    def entry(self) -> Context:
        return self.contexts[ENTRY_CONTEXT]

    def context(self, name: str) -> Context:
        return self.contexts[name]

    def rules_for(self, name: str) -> tuple[Rule, ...]:
        return self.rules[name]

    def __contains__(self, name: object) -> bool:
        return name in self.contexts

    def __repr__(self) -> str:
        return f"Grammar({self.name or '<anonymous>'!r}, contexts={len(self.contexts)})"
