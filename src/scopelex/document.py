"""Whole-document tokenizing with per-line resume points.

A TokenizedDocument keeps, next to the tokens, the LexState at the start of
every line. Those states are what incremental re-lexing restarts from.

Thread Safety:
TokenizedDocument is frozen; tokenize_document is a pure function apart
from the optional cache it is given.

"""

from __future__ import annotations

from dataclasses import dataclass

from scopelex.cache import TokenCache, hash_content, hash_settings
from scopelex.config import get_tokenize_config
from scopelex.diagnostics import Diagnostic
from scopelex.grammar.model import Grammar
from scopelex.lexer import LexState, Tokenizer
from scopelex.tokens import Token


@dataclass(frozen=True, slots=True)
class TokenizedDocument:
    """Tokens of a full document plus line resume points.

    Attributes:
        source_length: Length of the tokenized text
        tokens: Every token, in order
        line_states: LexState at the start of each line (index 0 = line 1)
        line_token_index: Index into ``tokens`` of each line's first token
        end_state: State after the last line
        diagnostics: Diagnostics from the pass, in source order
        fingerprint: Fingerprint of the grammar used
    """

    source_length: int
    tokens: tuple[Token, ...]
    line_states: tuple[LexState, ...]
    line_token_index: tuple[int, ...]
    end_state: LexState
    diagnostics: tuple[Diagnostic, ...] = ()
    fingerprint: str = ""

    @property
    def line_count(self) -> int:
        return len(self.line_states)

    def line_tokens(self, lineno: int) -> tuple[Token, ...]:
        """Tokens on a line (1-indexed).

        Raises:
            IndexError: If the line does not exist.
        """
        if not 1 <= lineno <= len(self.line_states):
            raise IndexError(f"line {lineno} out of range (1..{len(self.line_states)})")
        start = self.line_token_index[lineno - 1]
        end = (
            self.line_token_index[lineno]
            if lineno < len(self.line_token_index)
            else len(self.tokens)
        )
        return self.tokens[start:end]

    def text(self) -> str:
        """Reconstruct the source from token values."""
        return "".join(t.value for t in self.tokens)


def tokenize_document(
    source: str,
    grammar: Grammar,
    *,
    source_file: str | None = None,
    cache: TokenCache | None = None,
) -> TokenizedDocument:
    """Tokenize a whole document, recording per-line resume states.

    Args:
        source: Document text
        grammar: Loaded grammar
        source_file: Optional source file path for locations
        cache: Optional content-addressed token cache

    Returns:
        TokenizedDocument for the text.

    """
    content_hash = settings_hash = ""
    if cache is not None:
        settings_hash = hash_settings(grammar, get_tokenize_config(), source_file)
        if settings_hash:
            content_hash = hash_content(source)
            cached = cache.get(content_hash, settings_hash)
            if cached is not None:
                return cached

    doc = _run(Tokenizer(grammar, source, source_file=source_file), len(source), grammar)

    if cache is not None and settings_hash:
        cache.put(content_hash, settings_hash, doc)
    return doc


def _run(tokenizer: Tokenizer, source_length: int, grammar: Grammar) -> TokenizedDocument:
    tokens: list[Token] = []
    line_states: list[LexState] = []
    line_token_index: list[int] = []
    for state, line in tokenizer.lines():
        line_states.append(state)
        line_token_index.append(len(tokens))
        tokens.extend(line)

    return TokenizedDocument(
        source_length=source_length,
        tokens=tuple(tokens),
        line_states=tuple(line_states),
        line_token_index=tuple(line_token_index),
        end_state=tokenizer.state,
        diagnostics=tokenizer.diagnostics,
        fingerprint=grammar.fingerprint,
    )
