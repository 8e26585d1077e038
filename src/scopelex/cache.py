"""Content-addressed token cache for scopelex.

Provides (content_hash, settings_hash) -> TokenizedDocument caching to avoid
re-tokenizing unchanged documents (undo/revert, identical files).

Thread Safety:
    DictTokenCache is not thread-safe. For parallel tokenizing, use a cache
    implementation with internal locking (e.g. threading.Lock around get/put).

Example:
    >>> from scopelex import DictTokenCache, tokenize_document
    >>> cache = DictTokenCache()
    >>> doc1 = tokenize_document("pr 1", grammar, cache=cache)
    >>> doc2 = tokenize_document("pr 1", grammar, cache=cache)  # Cache hit
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from scopelex.utils.hashing import hash_str

if TYPE_CHECKING:
    from scopelex.config import TokenizeConfig
    from scopelex.document import TokenizedDocument
    from scopelex.grammar.model import Grammar


class TokenCache(Protocol):
    """Protocol for content-addressed token caches.

    Cache key is (content_hash, settings_hash). Cached value is a
    TokenizedDocument, which is immutable and safe to share across threads.
    """

    def get(self, content_hash: str, settings_hash: str) -> TokenizedDocument | None:
        """Return cached document if present, else None."""
        ...

    def put(self, content_hash: str, settings_hash: str, doc: TokenizedDocument) -> None:
        """Store document in cache."""
        ...


class DictTokenCache:
    """In-memory token cache using a dict.

    Not thread-safe. For parallel tokenizing, wrap with a lock or use a
    thread-safe implementation.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], TokenizedDocument] = {}

    def get(self, content_hash: str, settings_hash: str) -> TokenizedDocument | None:
        """Return cached document if present, else None."""
        return self._data.get((content_hash, settings_hash))

    def put(self, content_hash: str, settings_hash: str, doc: TokenizedDocument) -> None:
        """Store document in cache."""
        self._data[(content_hash, settings_hash)] = doc

    def __len__(self) -> int:
        return len(self._data)


def hash_content(source: str) -> str:
    """Compute SHA256 hash of source for cache key."""
    return hash_str(source)


def hash_settings(
    grammar: Grammar,
    config: TokenizeConfig,
    source_file: str | None = None,
) -> str:
    """Compute hash of everything besides the text that shapes the tokens.

    Returns an empty string (bypass the cache) when the grammar has no
    fingerprint, e.g. one constructed by hand instead of through load_grammar().
    """
    if not grammar.fingerprint:
        return ""
    parts = (
        grammar.fingerprint,
        str(config.fallback_scope),
        str(config.flag_unbalanced_pops),
        str(config.include_grammar_scope),
        str(config.max_line_length),
        str(source_file),
    )
    return hash_str("|".join(parts))


__all__ = [
    "DictTokenCache",
    "TokenCache",
    "hash_content",
    "hash_settings",
]
