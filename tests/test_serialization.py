"""Tests for scopelex.serialization — JSON round-trip of value objects."""

from __future__ import annotations

import json

import pytest

from scopelex import (
    Diagnostic,
    DiagnosticKind,
    LexState,
    Token,
    TokenKind,
    Tokenizer,
    from_dict,
    from_json,
    to_dict,
    to_json,
    tokenize_document,
)


class TestToDict:
    def test_token_fields(self) -> None:
        token = Token(TokenKind.PUSH, "(", 4, 5, ("source.sflk", "meta.group.sflk"), _lineno=2, _col=3)

        data = to_dict(token)

        assert data["_type"] == "Token"
        assert data["kind"] == "PUSH"
        assert data["scopes"] == ["source.sflk", "meta.group.sflk"]
        assert data["_lineno"] == 2
        assert "_location_cache" not in data

    def test_location_cache_never_serialized(self) -> None:
        token = Token(TokenKind.TEXT, "x", 0, 1)
        _ = token.location

        assert "_location_cache" not in to_dict(token)

    def test_state_fields(self) -> None:
        data = to_dict(LexState(("main", "string"), 12, 3, 5))

        assert data == {
            "_type": "LexState",
            "stack": ["main", "string"],
            "offset": 12,
            "lineno": 3,
            "col": 5,
        }

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError, match="Cannot serialize dict"):
            to_dict({"a": 1})  # type: ignore[arg-type]


class TestFromDict:
    def test_round_trip_token(self) -> None:
        token = Token(TokenKind.FALLBACK, "@", 7, 8, ("source.sflk",), _lineno=2, _col=1)

        assert from_dict(to_dict(token)) == token

    def test_round_trip_diagnostic(self) -> None:
        diagnostic = Diagnostic(DiagnosticKind.UNBALANCED_POP, "pop ignored", 3, 1, 4, "main")

        assert from_dict(to_dict(diagnostic)) == diagnostic

    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="Missing '_type'"):
            from_dict({"stack": ["main"]})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown type: 'Grammar'"):
            from_dict({"_type": "Grammar"})

    def test_unknown_enum_member(self) -> None:
        data = to_dict(Token(TokenKind.TEXT, "x", 0, 1))
        data["kind"] = "SPARKLE"

        with pytest.raises(ValueError, match="Unknown TokenKind: 'SPARKLE'"):
            from_dict(data)

    def test_missing_required_field(self) -> None:
        with pytest.raises(ValueError, match="Invalid Token data"):
            from_dict({"_type": "Token", "kind": "TEXT"})


class TestJson:
    def test_output_is_deterministic(self) -> None:
        state = LexState(("main", "comment-1"), 5, 2)

        assert to_json(state) == to_json(LexState(("main", "comment-1"), 5, 2))
        assert list(json.loads(to_json(state))) == sorted(json.loads(to_json(state)))

    def test_state_resumes_after_round_trip(self, sflk) -> None:
        head, tail = "# open\n", "close # pr\n"
        first = Tokenizer(sflk, head)
        list(first.tokenize())

        restored = from_json(to_json(first.state))
        assert restored == first.state

        resumed = list(Tokenizer(sflk, tail, state=restored).tokenize())
        assert resumed[1].kind is TokenKind.POP

    def test_document_round_trip(self, sflk) -> None:
        doc = tokenize_document("pr 1\n(2 @\n", sflk)

        restored = from_json(to_json(doc, indent=2))

        assert restored == doc
        assert restored.diagnostics[0].kind is DiagnosticKind.UNEXPECTED_CHARACTER

    def test_non_object_json(self) -> None:
        with pytest.raises(ValueError, match="Expected a JSON object"):
            from_json("[1, 2]")
