"""Incremental re-lexing for tokenized documents.

When a user edits one line, only the lines whose tokens can change need
re-lexing. This module accepts a previous TokenizedDocument plus the new
source text and an edit range, then:

1. Restarts from the LexState of the line containing the edit start.
2. Re-tokenizes line by line until it reaches a line start past the edit
   whose stack equals the old stack at the same (shifted) line start.
3. Reuses every old token from there on, shifted by the edit's size.

The result is identical to a full re-tokenize but usually costs a handful
of lines. An edit that changes the stack for the rest of the document (e.g.
opening a comment) re-lexes to the end, as it must.

Fallback:
    Invalid edit bounds, a length mismatch, or a document produced by a
    different grammar fall back to a full pass.

Thread Safety:
    ``retokenize`` is a pure function — safe to call from any thread.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import replace

from scopelex.diagnostics import Diagnostic
from scopelex.document import TokenizedDocument, tokenize_document
from scopelex.grammar.model import Grammar
from scopelex.lexer import LexState, Tokenizer
from scopelex.tokens import Token
from scopelex.utils.logger import get_logger

logger = get_logger(__name__)


def retokenize(
    new_source: str,
    previous: TokenizedDocument,
    grammar: Grammar,
    edit_start: int,
    edit_end: int,
    new_length: int,
    *,
    source_file: str | None = None,
) -> TokenizedDocument:
    """Re-tokenize only the edited region and splice into the old tokens.

    Args:
        new_source: The complete new source text (after the edit).
        previous: The TokenizedDocument from before the edit.
        grammar: Grammar used for ``previous``.
        edit_start: Offset in the OLD source where the edit begins.
        edit_end: Offset in the OLD source where the edit ends
            (the old text edit_start..edit_end was replaced).
        new_length: Length of the replacement text in the new source.
        source_file: Optional source file path for locations.

    Returns:
        A new TokenizedDocument reflecting the edit. Unaffected tokens are
        reused from ``previous`` (shared references when not shifted).

    """
    delta = new_length - (edit_end - edit_start)
    valid = (
        0 <= edit_start <= edit_end <= previous.source_length
        and new_length >= 0
        and len(new_source) == previous.source_length + delta
        and previous.fingerprint == grammar.fingerprint
    )
    if not valid or not previous.line_states:
        return _full_pass(new_source, grammar, source_file, "edit cannot be applied incrementally")

    # Line containing edit_start: its start state depends only on earlier text
    old_offsets = [s.offset for s in previous.line_states]
    restart_line = max(bisect_right(old_offsets, edit_start) - 1, 0)
    restart = previous.line_states[restart_line]
    edited_end = edit_start + new_length  # End of replacement, new coordinates

    tokenizer = Tokenizer(
        grammar,
        new_source[restart.offset :],
        state=restart,
        source_file=source_file,
    )

    tokens: list[Token] = list(previous.tokens[: previous.line_token_index[restart_line]])
    line_states: list[LexState] = list(previous.line_states[:restart_line])
    line_token_index: list[int] = list(previous.line_token_index[:restart_line])
    diagnostics: list[Diagnostic] = [d for d in previous.diagnostics if d.offset < restart.offset]

    offset_index = {offset: i for i, offset in enumerate(old_offsets)}
    sync_line: int | None = None
    new_state: LexState | None = None
    lines = tokenizer.lines()
    for state, line in lines:
        if state.offset >= edited_end and state.offset > restart.offset:
            old_line = offset_index.get(state.offset - delta)
            if old_line is not None and previous.line_states[old_line].same_stack(state):
                sync_line, new_state = old_line, state
                break
        line_states.append(state)
        line_token_index.append(len(tokens))
        tokens.extend(line)
    lines.close()

    if sync_line is None or new_state is None:
        diagnostics.extend(tokenizer.diagnostics)
        logger.debug("Re-lexed from line %d to end of document", restart.lineno)
        return TokenizedDocument(
            source_length=len(new_source),
            tokens=tuple(tokens),
            line_states=tuple(line_states),
            line_token_index=tuple(line_token_index),
            end_state=tokenizer.state,
            diagnostics=tuple(diagnostics),
            fingerprint=grammar.fingerprint,
        )

    # The tokenizer already scanned the sync line; keep only earlier lines' reports
    diagnostics.extend(d for d in tokenizer.diagnostics if d.offset < new_state.offset)
    old_sync = previous.line_states[sync_line]
    line_delta = new_state.lineno - old_sync.lineno
    relexed = new_state.lineno - restart.lineno
    logger.debug("Re-lexed %d line(s) from line %d", relexed, restart.lineno)

    token_shift = len(tokens) - previous.line_token_index[sync_line]
    tokens.extend(
        t.shifted(delta, line_delta)
        for t in previous.tokens[previous.line_token_index[sync_line] :]
    )
    line_states.extend(_shift_state(s, delta, line_delta) for s in previous.line_states[sync_line:])
    line_token_index.extend(i + token_shift for i in previous.line_token_index[sync_line:])
    diagnostics.extend(
        _shift_diagnostic(d, delta, line_delta)
        for d in previous.diagnostics
        if d.offset >= old_sync.offset
    )

    return TokenizedDocument(
        source_length=len(new_source),
        tokens=tuple(tokens),
        line_states=tuple(line_states),
        line_token_index=tuple(line_token_index),
        end_state=_shift_state(previous.end_state, delta, line_delta),
        diagnostics=tuple(diagnostics),
        fingerprint=grammar.fingerprint,
    )


def _shift_state(state: LexState, delta: int, line_delta: int) -> LexState:
    if delta == 0 and line_delta == 0:
        return state
    return replace(state, offset=state.offset + delta, lineno=state.lineno + line_delta)


def _shift_diagnostic(diagnostic: Diagnostic, delta: int, line_delta: int) -> Diagnostic:
    if delta == 0 and line_delta == 0:
        return diagnostic
    return replace(
        diagnostic,
        offset=diagnostic.offset + delta,
        lineno=diagnostic.lineno + line_delta,
    )


def _full_pass(
    source: str,
    grammar: Grammar,
    source_file: str | None,
    reason: str,
) -> TokenizedDocument:
    """Fall back to a full re-tokenize."""
    logger.debug("Full re-tokenize: %s", reason)
    return tokenize_document(source, grammar, source_file=source_file)
