"""Property-based tests for tokenizer invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from scopelex import LexState, Tokenizer, TokenKind, get_grammar, load_grammar, tokenize

SFLK = get_grammar("sflk")

# Characters that exercise every SFLK context plus a few nothing matches
SFLK_ALPHABET = '#()[]{}"\\ abpr12+-<>@\n'

PARENS = load_grammar(
    {
        "contexts": {
            "main": [
                {"match": r"\(", "push": "paren"},
                {"match": r"\)", "pop": True},
                {"match": r"[^()]+"},
            ],
            "paren": [
                {"match": r"\)", "pop": True},
                {"include": "main"},
            ],
        }
    }
)


class TestCoverage:
    """Token spans tile the input exactly."""

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_concatenation_reproduces_input(self, source: str) -> None:
        tokens = list(tokenize(source, SFLK))

        assert "".join(t.value for t in tokens) == source

    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300))
    @settings(max_examples=200)
    def test_spans_are_contiguous_and_non_empty(self, source: str) -> None:
        tokens = list(tokenize(source, SFLK))

        position = 0
        for token in tokens:
            assert token.start == position
            assert token.end > token.start
            assert source[token.start : token.end] == token.value
            position = token.end
        assert position == len(source)

    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300))
    @settings(max_examples=100)
    def test_line_and_column_match_offsets(self, source: str) -> None:
        for token in tokenize(source, SFLK):
            line_start = source.rfind("\n", 0, token.start) + 1
            assert token.lineno == source.count("\n", 0, token.start) + 1
            assert token.col == token.start - line_start + 1

    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300))
    @settings(max_examples=100)
    def test_fallback_tokens_are_single_characters(self, source: str) -> None:
        for token in tokenize(source, SFLK):
            if token.kind is TokenKind.FALLBACK:
                assert len(token.value) == 1


class TestDeterminism:
    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300))
    @settings(max_examples=100)
    def test_same_input_same_tokens(self, source: str) -> None:
        first = list(tokenize(source, SFLK))
        second = list(tokenize(source, SFLK))

        assert first == second


class TestStackSafety:
    @given(st.text(alphabet="()x\n", max_size=300))
    @settings(max_examples=200)
    def test_stack_never_below_entry(self, source: str) -> None:
        tokenizer = Tokenizer(PARENS, source)
        for state, _ in tokenizer.lines():
            assert state.stack[0] == "main"
            assert state.depth >= 1

        assert tokenizer.state.stack[0] == "main"

    @given(st.text(alphabet="()x", max_size=200))
    @settings(max_examples=200)
    def test_final_depth_matches_bracket_balance(self, source: str) -> None:
        depth = 0
        for char in source:
            if char == "(":
                depth += 1
            elif char == ")":
                depth = max(depth - 1, 0)

        tokenizer = Tokenizer(PARENS, source)
        list(tokenizer.tokenize())

        assert tokenizer.state.depth == depth + 1

    @given(st.text(alphabet="()x", max_size=200))
    @settings(max_examples=100)
    def test_invalid_tokens_are_excess_closers(self, source: str) -> None:
        depth = excess = 0
        for char in source:
            if char == "(":
                depth += 1
            elif char == ")":
                if depth:
                    depth -= 1
                else:
                    excess += 1

        tokens = list(tokenize(source, PARENS))

        assert sum(t.kind is TokenKind.INVALID for t in tokens) == excess


class TestPrecedence:
    @given(st.text(alphabet="ab", min_size=1, max_size=50))
    @settings(max_examples=100)
    def test_first_rule_wins_over_longer_match(self, source: str) -> None:
        grammar = load_grammar(
            {
                "contexts": {
                    "main": [
                        {"match": "a", "scope": "first"},
                        {"match": "[ab]+", "scope": "second"},
                    ]
                }
            }
        )

        for token in tokenize(source, grammar):
            if token.value.startswith("a"):
                assert token.value == "a"
                assert token.scope == "first"
            else:
                assert token.value[0] == "b"
                assert token.scope == "second"


class TestCommentNesting:
    @given(
        st.lists(st.sampled_from(["#", "##", "###", " x ", "\n"]), max_size=40),
    )
    @settings(max_examples=200)
    def test_depth_never_exceeds_three_comment_levels(self, pieces: list[str]) -> None:
        tokenizer = Tokenizer(SFLK, "".join(pieces))
        for state, _ in tokenizer.lines():
            assert state.depth <= 4
        assert tokenizer.state.depth <= 4

    @given(st.integers(min_value=0, max_value=3))
    def test_matched_runs_close_everything(self, levels: int) -> None:
        opens = ["###", "##", "#"][3 - levels :]
        source = " ".join(opens) + " body " + " ".join(reversed(opens))
        tokenizer = Tokenizer(SFLK, source)
        tokens = list(tokenizer.tokenize())

        assert tokenizer.state.stack == ("main",)
        assert sum(t.kind is TokenKind.PUSH for t in tokens) == levels
        assert sum(t.kind is TokenKind.POP for t in tokens) == levels


class TestRestart:
    """Splitting at any line start or token boundary and resuming reproduces a full pass."""

    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300), st.data())
    @settings(max_examples=200)
    def test_resume_at_line_start(self, source: str, data: st.DataObject) -> None:
        line_starts = [0] + [i + 1 for i, c in enumerate(source) if c == "\n"]
        split = data.draw(st.sampled_from(line_starts))

        first = Tokenizer(SFLK, source[:split])
        tokens = list(first.tokenize())
        tokens += Tokenizer(SFLK, source[split:], state=first.state).tokenize()

        assert tokens == list(tokenize(source, SFLK))

    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300))
    @settings(max_examples=100)
    def test_every_line_state_resumes(self, source: str) -> None:
        full = Tokenizer(SFLK, source)
        per_line = list(full.lines())

        for index, (state, _) in enumerate(per_line):
            resumed = list(Tokenizer(SFLK, source[state.offset :], state=state).tokenize())
            expected = [t for _, line in per_line[index:] for t in line]
            assert resumed == expected

    def test_resume_inside_a_line(self) -> None:
        first = Tokenizer(SFLK, "(1")
        tokens = list(first.tokenize())
        assert first.state == LexState(("main", "group"), 2, 1, 3)

        tokens += Tokenizer(SFLK, "+2)", state=first.state).tokenize()

        assert tokens == list(tokenize("(1+2)", SFLK))

    @given(st.text(alphabet=SFLK_ALPHABET, max_size=300), st.data())
    @settings(max_examples=200)
    def test_resume_at_token_boundary(self, source: str, data: st.DataObject) -> None:
        full = list(tokenize(source, SFLK))
        boundaries = sorted({0, *(t.end for t in full)})
        split = data.draw(st.sampled_from(boundaries))

        first = Tokenizer(SFLK, source[:split])
        tokens = list(first.tokenize())
        tokens += Tokenizer(SFLK, source[split:], state=first.state).tokenize()

        assert tokens == full

    def test_default_state_is_entry(self) -> None:
        assert LexState().stack == ("main",)
