"""Context-stack tokenizer.

Scans source line by line. At each position the rules of the context on
top of the stack are tried in order, anchored at the cursor; the first
rule that matches wins, even when a later rule would match more text.
Matches may push a named context or pop the current one.

Guarantees:
- Total coverage: token spans concatenate to the input, with no gaps and
  no overlaps. Unmatched characters become single-character FALLBACK tokens.
- The stack never drops below the entry context.
- Forward progress: zero-width transitions that cycle at one position are
  broken by a fallback character.
- Tokens never span a line break, so any line start is a resume point.
  A pass that stops inside a line can also be resumed from its state,
  which carries the column.

Thread Safety:
Tokenizer instances are single-use. Create one per pass.
All mutable state is instance-local; the Grammar is only read.

"""

from __future__ import annotations

import re
from collections.abc import Iterator

from scopelex.config import TokenizeConfig, get_tokenize_config
from scopelex.diagnostics import Diagnostic, DiagnosticKind
from scopelex.grammar.model import Grammar, Rule
from scopelex.lexer.scopes import context_scopes, split_match
from scopelex.lexer.state import LexState
from scopelex.profiling import get_tokenize_accumulator
from scopelex.tokens import Token, TokenKind
from scopelex.utils.logger import get_logger

logger = get_logger(__name__)

# Zero-width transitions allowed at one position before forcing progress
ZERO_WIDTH_LIMIT = 64


class Tokenizer:
    """Grammar-driven tokenizer with a context stack.

    Usage:
            >>> tokenizer = Tokenizer(grammar, "(1+2)")
            >>> [t.value for t in tokenizer.tokenize()]
            ['(', '1', '+', '2', ')']

    Resuming:
        ``state`` is the stack where tokenizing stopped: the next line start,
        or the end of a final line without a newline. Passing it to a new
        Tokenizer over the remaining text continues with absolute offsets,
        line numbers and columns:

            >>> first = Tokenizer(grammar, head)
            >>> tokens = list(first.tokenize())
            >>> tokens += Tokenizer(grammar, tail, state=first.state).tokenize()

    Thread Safety:
        Tokenizer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_grammar",
        "_source",
        "_source_len",
        "_source_file",
        "_config",
        "_base",  # Absolute offset of source[0]
        "_pos",  # Start of the next unprocessed line (local)
        "_lineno",
        "_col_base",  # Columns before _pos on its line
        "_stack",  # Live context stack, mutated mid-line
        "_line_stack",  # Stack as it was at _pos
        "_root",  # Grammar scope prefix
        "_scope_cache",
        "_diagnostics",
        "_token_count",
        "_fallback_count",
        "_line_count",
    )

    def __init__(
        self,
        grammar: Grammar,
        source: str,
        *,
        state: LexState | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize tokenizer.

        Args:
            grammar: Loaded grammar
            source: Text to tokenize, starting at ``state.offset``
            state: Stack and position to resume from (default: entry context
                at offset 0, line 1, column 1)
            source_file: Optional source file path for locations

        Raises:
            StateError: If ``state`` does not fit ``grammar``.
        """
        state = state or LexState()
        state.validate(grammar)

        self._grammar = grammar
        self._source = source
        self._source_len = len(source)
        self._source_file = source_file
        # Captured now: generators run lazily, possibly outside the caller's context
        self._config: TokenizeConfig = get_tokenize_config()

        self._base = state.offset
        self._pos = 0
        self._lineno = state.lineno
        self._col_base = state.col - 1
        self._stack: list[str] = list(state.stack)
        self._line_stack: tuple[str, ...] = state.stack

        use_root = grammar.scope and self._config.include_grammar_scope
        self._root: tuple[str, ...] = (grammar.scope,) if use_root else ()
        self._scope_cache: dict[tuple[tuple[str, ...], bool], tuple[str, ...]] = {}

        self._diagnostics: list[Diagnostic] = []
        self._token_count = 0
        self._fallback_count = 0
        self._line_count = 0

    @property
    def state(self) -> LexState:
        """Snapshot at the start of the next unprocessed text."""
        return LexState(
            stack=self._line_stack,
            offset=self._base + self._pos,
            lineno=self._lineno,
            col=self._col_base + 1,
        )

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Diagnostics recorded so far, in source order."""
        return tuple(self._diagnostics)

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            Token objects one at a time. The consumer may stop at any point;
            nothing needs cleaning up.
        """
        source_len = self._source_len
        while self._pos < source_len:
            line_end = self._find_line_end()
            yield from self._tokenize_line(line_end)
            self._commit_line(line_end)
        self._finish()

    def lines(self) -> Iterator[tuple[LexState, list[Token]]]:
        """Tokenize line by line.

        Yields:
            (state at line start, tokens of that line) pairs. The state is
            exactly what a new Tokenizer needs to re-tokenize from that line.
        """
        source_len = self._source_len
        while self._pos < source_len:
            start_state = self.state
            line_end = self._find_line_end()
            tokens = list(self._tokenize_line(line_end))
            self._commit_line(line_end)
            yield start_state, tokens
        self._finish()

    def _commit_line(self, line_end: int) -> None:
        """Advance past a finished line and snapshot the stack."""
        if self._source[line_end - 1] == "\n":
            self._lineno += 1
            self._col_base = 0
        else:
            self._col_base += line_end - self._pos
        self._pos = line_end
        self._line_count += 1
        self._line_stack = tuple(self._stack)

    def _finish(self) -> None:
        if len(self._stack) > 1:
            self._report(
                DiagnosticKind.UNTERMINATED_CONTEXT,
                f"end of input inside {self._stack[-1]!r}",
                self._base + self._source_len,
                self._lineno,
                1,  # Just past the last character
            )

        acc = get_tokenize_accumulator()
        if acc is not None:
            acc.record_pass(self._line_count, self._token_count, self._fallback_count)

    # =========================================================================
    # Line scanning
    # =========================================================================

    def _find_line_end(self) -> int:
        """Position just past the next newline, or end of source."""
        idx = self._source.find("\n", self._pos)
        return idx + 1 if idx != -1 else self._source_len

    def _tokenize_line(self, line_end: int) -> Iterator[Token]:
        line_start = self._pos
        line = self._source[line_start:line_end]
        line_len = len(line)

        limit = self._config.max_line_length
        if limit is not None and line_len > limit:
            self._report(
                DiagnosticKind.LINE_TOO_LONG,
                f"line of {line_len} characters exceeds limit of {limit}",
                self._base + line_start,
                self._lineno,
                1,
            )
            yield self._fallback(line, 0, line_len, line_start)
            return

        grammar = self._grammar
        pos = 0
        # A final line without a newline also gets zero-width transitions at its end
        scan_end = line_len if line[-1] == "\n" else line_len + 1
        seen: set[tuple[str, ...]] = set()  # Stacks already tried at pos
        while pos < scan_end:
            at_end = pos == line_len
            stack_key = tuple(self._stack)
            if stack_key in seen or len(seen) >= ZERO_WIDTH_LIMIT:
                if at_end:
                    break
                self._report(
                    DiagnosticKind.ZERO_WIDTH_LOOP,
                    "zero-width transitions returned to the same stack",
                    self._base + line_start + pos,
                    self._lineno,
                    pos + 1,
                )
                yield self._fallback(line, pos, pos + 1, line_start)
                pos += 1
                seen.clear()
                continue

            for rule in grammar.rules_for(self._stack[-1]):
                match = rule.pattern.match(line, pos)
                if match is None:
                    continue
                if match.end() == pos:
                    if not rule.has_transition or (rule.pop and len(self._stack) == 1):
                        continue  # Would not make progress or change the stack
                    seen.add(stack_key)
                    self._apply(match, rule, line, line_start, pos)
                    break

                yield from self._apply(match, rule, line, line_start, pos)
                pos = match.end()
                seen.clear()
                break
            else:
                if at_end:
                    break
                yield self._fallback(line, pos, pos + 1, line_start)
                pos += 1
                seen.clear()

    def _apply(
        self,
        match: re.Match[str],
        rule: Rule,
        line: str,
        line_start: int,
        pos: int,
    ) -> list[Token]:
        """Perform a rule's transition and build its tokens.

        Returns a list (not a generator) so zero-width transitions take
        effect even though nothing is yielded.
        """
        stack = self._stack
        if rule.push is not None:
            base = self._scopes(tuple(stack))
            meta = self._grammar.context(rule.push).meta_scope
            if meta:
                base = (*base, meta)
            kind = TokenKind.PUSH
            stack.append(rule.push)
        elif rule.pop and len(stack) > 1:
            base = self._scopes(tuple(stack), delimiter=True)
            kind = TokenKind.POP
            stack.pop()
        else:
            base = self._scopes(tuple(stack))
            kind = TokenKind.TEXT
            if rule.pop:
                # Entry context is never popped
                if self._config.flag_unbalanced_pops:
                    kind = TokenKind.INVALID
                    self._report(
                        DiagnosticKind.UNBALANCED_POP,
                        f"pop of the entry context ignored ({rule.pattern.pattern!r})",
                        self._base + line_start + pos,
                        self._lineno,
                        pos + 1,
                    )

        if match.end() == pos:
            return []
        return [
            self._make_token(kind, line[start:end], line_start + start, start + 1, scopes)
            for start, end, scopes in split_match(match, rule, base)
        ]

    def _fallback(self, line: str, start: int, end: int, line_start: int) -> Token:
        text = line[start:end]
        self._fallback_count += 1
        if end - start == 1:
            self._report(
                DiagnosticKind.UNEXPECTED_CHARACTER,
                f"no rule in {self._stack[-1]!r} matches {text!r}",
                self._base + line_start + start,
                self._lineno,
                start + 1,
            )
        scopes = self._scopes(tuple(self._stack))
        if self._config.fallback_scope:
            scopes = (*scopes, self._config.fallback_scope)
        return self._make_token(TokenKind.FALLBACK, text, line_start + start, start + 1, scopes)

    # =========================================================================
    # Scopes, tokens, diagnostics
    # =========================================================================

    def _scopes(self, stack: tuple[str, ...], *, delimiter: bool = False) -> tuple[str, ...]:
        key = (stack, delimiter)
        cached = self._scope_cache.get(key)
        if cached is None:
            contexts = [self._grammar.context(name) for name in stack]
            cached = self._root + context_scopes(contexts, delimiter=delimiter)
            self._scope_cache[key] = cached
        return cached

    def _make_token(
        self,
        kind: TokenKind,
        value: str,
        local_start: int,
        local_col: int,
        scopes: tuple[str, ...],
    ) -> Token:
        self._token_count += 1
        start = self._base + local_start
        return Token(
            kind=kind,
            value=value,
            start=start,
            end=start + len(value),
            scopes=scopes,
            _lineno=self._lineno,
            _col=self._col_base + local_col,
            _source_file=self._source_file,
        )

    def _report(
        self, kind: DiagnosticKind, message: str, offset: int, lineno: int, local_col: int
    ) -> None:
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            offset=offset,
            lineno=lineno,
            col=self._col_base + local_col,
            context=self._stack[-1],
        )
        self._diagnostics.append(diagnostic)
        logger.debug("%s", diagnostic)
