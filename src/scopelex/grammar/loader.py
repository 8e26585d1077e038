"""Grammar loading and validation.

Turns plain grammar data (as found in a JSON or TOML file, or a Python
dict) into an immutable Grammar. All validation happens here, once, so a
tokenizing pass can never hit a dangling context reference.

Grammar data shape (Sublime-style contexts):

    {
        "name": "SFLK",
        "scope": "source.sflk",
        "contexts": {
            "main": [
                {"include": "comments"},
                {"match": "\\(", "scope": "punctuation.section.group.begin", "push": "group"},
                {"match": "[0-9]+", "scope": "constant.numeric"},
            ],
            "group": [
                {"meta_scope": "meta.group"},
                {"match": "\\)", "scope": "punctuation.section.group.end", "pop": True},
                {"include": "main"},
            ],
            ...
        },
    }

"""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from scopelex.errors import GrammarError
from scopelex.grammar.model import ENTRY_CONTEXT, Context, Grammar, Include, Rule
from scopelex.utils.hashing import hash_data
from scopelex.utils.logger import get_logger

logger = get_logger(__name__)

_RULE_KEYS = frozenset({"match", "scope", "captures", "push", "pop"})
_META_KEYS = ("meta_scope", "meta_content_scope")


def load_grammar(data: Mapping[str, Any]) -> Grammar:
    """Validate grammar data and build an immutable Grammar.

    Args:
        data: Mapping with a "contexts" table and optional "name"/"scope".

    Returns:
        Loaded Grammar with includes flattened.

    Raises:
        GrammarError: If the data is malformed, the entry context is missing,
            a push/include names an unknown context, a pattern does not
            compile, or includes form a cycle.

    Example:
        >>> grammar = load_grammar({
        ...     "scope": "source.demo",
        ...     "contexts": {"main": [{"match": "[0-9]+", "scope": "constant.numeric"}]},
        ... })
        >>> grammar.rules_for("main")[0].scope
        'constant.numeric'
    """
    if not isinstance(data, Mapping):
        raise GrammarError(f"grammar data must be a mapping, got {type(data).__name__}")

    name = data.get("name", "")
    if not isinstance(name, str):
        raise GrammarError("grammar 'name' must be a string")
    scope = _optional_str(data.get("scope"), "scope", name, None, None)

    raw_contexts = data.get("contexts")
    if not isinstance(raw_contexts, Mapping) or not raw_contexts:
        raise GrammarError("grammar must define a non-empty 'contexts' table", name)
    if ENTRY_CONTEXT not in raw_contexts:
        raise GrammarError(f"grammar has no entry context {ENTRY_CONTEXT!r}", name)

    contexts = {
        ctx_name: _build_context(ctx_name, items, name)
        for ctx_name, items in raw_contexts.items()
    }
    _check_references(contexts, name)
    rules = _flatten(contexts, name)

    grammar = Grammar(
        contexts=contexts,
        rules=rules,
        name=name,
        scope=scope,
        fingerprint=hash_data(dict(data)),
    )
    logger.debug(
        "Loaded grammar %r: %d contexts, %d rules",
        name,
        len(contexts),
        sum(len(r) for r in rules.values()),
    )
    return grammar


def load_grammar_file(path: str | Path) -> Grammar:
    """Load a grammar from a .json or .toml file.

    Raises:
        GrammarError: On unreadable files, unsupported suffixes, syntax
            errors in the file, or any load_grammar() validation failure.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        elif suffix == ".toml":
            with path.open("rb") as f:
                data = tomllib.load(f)
        else:
            raise GrammarError(f"unsupported grammar file type {suffix!r} ({path})")
    except OSError as e:
        raise GrammarError(f"cannot read grammar file {path}: {e}") from e
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise GrammarError(f"invalid grammar file {path}: {e}") from e

    logger.debug("Read grammar data from %s", path)
    return load_grammar(data)


def _optional_str(
    value: Any,
    key: str,
    grammar: str,
    context: str | None,
    index: int | None,
) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise GrammarError(f"{key!r} must be a string", grammar, context, index)


def _build_context(name: str, items: Any, grammar: str) -> Context:
    if not isinstance(name, str) or not name:
        raise GrammarError(f"context names must be non-empty strings, got {name!r}", grammar)
    if not isinstance(items, list | tuple):
        raise GrammarError("context must be a list of items", grammar, name)

    meta: dict[str, str] = {}
    built: list[Rule | Include] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise GrammarError("context items must be tables", grammar, name, index)

        if "include" in item:
            if len(item) != 1:
                raise GrammarError("'include' items take no other keys", grammar, name, index)
            target = item["include"]
            if not isinstance(target, str):
                raise GrammarError("'include' must name a context", grammar, name, index)
            built.append(Include(target))
            continue

        meta_key = next((k for k in _META_KEYS if k in item), None)
        if meta_key is not None:
            if len(item) != 1:
                raise GrammarError(f"{meta_key!r} items take no other keys", grammar, name, index)
            if meta_key in meta:
                raise GrammarError(f"duplicate {meta_key!r}", grammar, name, index)
            value = _optional_str(item[meta_key], meta_key, grammar, name, index)
            if value:
                meta[meta_key] = value
            continue

        built.append(_build_rule(item, grammar, name, index))

    return Context(
        name=name,
        items=tuple(built),
        meta_scope=meta.get("meta_scope"),
        meta_content_scope=meta.get("meta_content_scope"),
    )


def _build_rule(item: Mapping[str, Any], grammar: str, context: str, index: int) -> Rule:
    unknown = set(item) - _RULE_KEYS
    if unknown:
        raise GrammarError(f"unknown rule keys: {', '.join(sorted(unknown))}", grammar, context, index)
    if "match" not in item:
        raise GrammarError("rule has no 'match' pattern", grammar, context, index)

    source = item["match"]
    if not isinstance(source, str):
        raise GrammarError("'match' must be a string", grammar, context, index)
    try:
        pattern = re.compile(source)
    except re.error as e:
        raise GrammarError(f"invalid pattern {source!r}: {e}", grammar, context, index) from e

    push = _optional_str(item.get("push"), "push", grammar, context, index)
    pop = item.get("pop", False)
    if not isinstance(pop, bool):
        raise GrammarError("'pop' must be true or false", grammar, context, index)
    if push is not None and pop:
        raise GrammarError("rule cannot both push and pop", grammar, context, index)

    return Rule(
        pattern=pattern,
        scope=_optional_str(item.get("scope"), "scope", grammar, context, index) or None,
        captures=_build_captures(item.get("captures"), pattern, grammar, context, index),
        push=push,
        pop=pop,
    )


def _build_captures(
    raw: Any,
    pattern: re.Pattern[str],
    grammar: str,
    context: str,
    index: int,
) -> tuple[tuple[int, str], ...]:
    if raw is None:
        return ()
    if not isinstance(raw, Mapping):
        raise GrammarError("'captures' must be a table", grammar, context, index)

    captures: dict[int, str] = {}
    for key, scope in raw.items():
        # JSON and TOML keys are always strings
        try:
            group = int(key)
        except (TypeError, ValueError):
            raise GrammarError(f"capture key {key!r} is not a group number", grammar, context, index) from None
        if not 0 <= group <= pattern.groups:
            raise GrammarError(
                f"capture group {group} out of range (pattern has {pattern.groups})",
                grammar,
                context,
                index,
            )
        if not isinstance(scope, str) or not scope:
            raise GrammarError(f"capture {group} scope must be a string", grammar, context, index)
        captures[group] = scope
    return tuple(sorted(captures.items()))


def _check_references(contexts: Mapping[str, Context], grammar: str) -> None:
    for context in contexts.values():
        for index, item in enumerate(context.items):
            target = item.context if isinstance(item, Include) else item.push
            if target is not None and target not in contexts:
                verb = "includes" if isinstance(item, Include) else "pushes"
                raise GrammarError(
                    f"{verb} unknown context {target!r}",
                    grammar,
                    context.name,
                    index,
                )


def _flatten(contexts: Mapping[str, Context], grammar: str) -> dict[str, tuple[Rule, ...]]:
    """Resolve includes depth-first, splicing rules at the include position."""
    resolved: dict[str, tuple[Rule, ...]] = {}

    def resolve(name: str, chain: tuple[str, ...]) -> tuple[Rule, ...]:
        if name in resolved:
            return resolved[name]
        if name in chain:
            cycle = " -> ".join((*chain[chain.index(name) :], name))
            raise GrammarError(f"include cycle: {cycle}", grammar, name)

        rules: list[Rule] = []
        for item in contexts[name].items:
            if isinstance(item, Include):
                rules.extend(resolve(item.context, (*chain, name)))
            else:
                rules.append(item)
        resolved[name] = tuple(rules)
        return resolved[name]

    for name in contexts:
        resolve(name, ())
    return resolved
