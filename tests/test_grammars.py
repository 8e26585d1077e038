"""Tests for the bundled grammar registry and the SFLK grammar."""

from __future__ import annotations

import pytest

from scopelex import BUILTIN_GRAMMARS, GrammarError, TokenKind, get_grammar, tokenize


class TestRegistry:
    def test_sflk_registered(self) -> None:
        assert "sflk" in BUILTIN_GRAMMARS

    def test_lookup_case_insensitive(self) -> None:
        assert get_grammar("SFLK") is get_grammar("sflk")

    def test_unknown_grammar(self) -> None:
        with pytest.raises(GrammarError, match="Unknown grammar: 'cobol'. Available: sflk"):
            get_grammar("cobol")

    def test_metadata(self) -> None:
        grammar = get_grammar("sflk")
        assert grammar.name == "SFLK"
        assert grammar.scope == "source.sflk"
        assert grammar.fingerprint


def _pairs(source: str) -> list[tuple[str, str | None]]:
    return [(t.value, t.scope) for t in tokenize(source, get_grammar("sflk")) if t.value.strip()]


class TestSflkLexicalSurface:
    def test_keywords_and_variables(self) -> None:
        assert _pairs("if x th pr x el np") == [
            ("if", "keyword.other.sflk"),
            ("x", "variable.other.sflk"),
            ("th", "keyword.other.sflk"),
            ("pr", "keyword.other.sflk"),
            ("x", "variable.other.sflk"),
            ("el", "keyword.other.sflk"),
            ("np", "keyword.other.sflk"),
        ]

    def test_operators(self) -> None:
        assert _pairs("a < 1 > b - 2 * 3 / 4") == [
            ("a", "variable.other.sflk"),
            ("<", "keyword.operator.assignment.sflk"),
            ("1", "constant.numeric.integer.sflk"),
            (">", "keyword.operator.chain.sflk"),
            ("b", "variable.other.sflk"),
            ("-", "keyword.operator.arithmetic.sflk"),
            ("2", "constant.numeric.integer.sflk"),
            ("*", "keyword.operator.arithmetic.sflk"),
            ("3", "constant.numeric.integer.sflk"),
            ("/", "keyword.operator.arithmetic.sflk"),
            ("4", "constant.numeric.integer.sflk"),
        ]

    def test_string_with_escapes(self) -> None:
        tokens = list(tokenize(r'"a\n\q"', get_grammar("sflk")))

        assert [t.value for t in tokens] == ['"', "a", r"\n", r"\q", '"']
        assert tokens[2].scope == "constant.character.escape.sflk"
        assert tokens[3].scope == "invalid.illegal.unknown-escape.sflk"
        assert all("string.quoted.double.sflk" in t.scopes for t in tokens)

    def test_brackets_and_blocks(self) -> None:
        tokens = list(tokenize("{[1]}", get_grammar("sflk")))

        assert [t.kind for t in tokens] == [
            TokenKind.PUSH,
            TokenKind.PUSH,
            TokenKind.TEXT,
            TokenKind.POP,
            TokenKind.POP,
        ]
        assert tokens[2].scopes == (
            "source.sflk",
            "meta.block.sflk",
            "meta.brackets.sflk",
            "constant.numeric.integer.sflk",
        )

    def test_mismatched_closer_inside_group(self) -> None:
        tokens = list(tokenize("(1]2)", get_grammar("sflk")))

        assert tokens[2].value == "]"
        assert tokens[2].scope == "invalid.illegal.stray-bracket-end.sflk"
        assert tokens[-1].kind is TokenKind.POP

    def test_comment_inside_group(self) -> None:
        tokens = list(tokenize("(# ) #)", get_grammar("sflk")))

        assert tokens[2].value == " ) "
        assert "comment.block.level1.sflk" in tokens[2].scopes
        assert tokens[-1].kind is TokenKind.POP
        assert tokens[-1].value == ")"
