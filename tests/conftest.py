"""Shared fixtures for scopelex tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from scopelex import Grammar, get_grammar, load_grammar, reset_tokenize_config


@pytest.fixture(autouse=True)
def _default_config() -> Iterator[None]:
    """Every test starts and ends with the default tokenize config."""
    reset_tokenize_config()
    yield
    reset_tokenize_config()


@pytest.fixture
def sflk() -> Grammar:
    """The bundled SFLK grammar."""
    return get_grammar("sflk")


@pytest.fixture
def paren_grammar() -> Grammar:
    """Minimal grammar: digits, and parentheses that push and pop."""
    return load_grammar(
        {
            "name": "parens",
            "scope": "source.parens",
            "contexts": {
                "main": [
                    {"match": r"\(", "scope": "paren.begin", "push": "paren"},
                    {"match": r"\)", "scope": "paren.end", "pop": True},
                    {"match": r"[0-9]+", "scope": "number"},
                    {"match": r"\s+"},
                ],
                "paren": [
                    {"meta_scope": "meta.paren"},
                    {"meta_content_scope": "meta.paren.content"},
                    {"match": r"\)", "scope": "paren.end", "pop": True},
                    {"include": "main"},
                ],
            },
        }
    )
