"""Hashing utilities for scopelex.

Provides stable hashes for cache keys and grammar fingerprints.

Example:
    >>> from scopelex.utils.hashing import hash_str
    >>> hash_str("hello world", truncate=16)
    'b94d27b9934d3e08'
"""

import hashlib
from collections.abc import Mapping
from typing import Any


def hash_str(
    content: str,
    truncate: int | None = None,
    algorithm: str = "sha256",
) -> str:
    """Hash string content using specified algorithm.

    Args:
        content: String content to hash
        truncate: Truncate result to N characters (None = full hash)
        algorithm: Hash algorithm ('sha256', 'md5')

    Returns:
        Hex digest of hash, optionally truncated

    Examples:
        >>> hash_str("hello", truncate=16)
        '2cf24dba5fb0a30e'
    """
    hasher = hashlib.new(algorithm)
    hasher.update(content.encode("utf-8"))
    digest = hasher.hexdigest()
    return digest[:truncate] if truncate is not None else digest


def hash_data(value: Any, *, truncate: int = 16) -> str:
    """Deterministic structural hash for plain grammar data.

    Walks dicts (sorted by key), lists and tuples, so two equal data trees
    hash the same across process runs regardless of dict insertion order.
    """

    def update(hasher: Any, item: Any) -> None:
        if isinstance(item, Mapping):
            hasher.update(b"dict{")
            for key in sorted(item, key=str):
                update(hasher, str(key))
                update(hasher, item[key])
            hasher.update(b"}")
            return

        if isinstance(item, (list, tuple)):
            hasher.update(b"seq[")
            for element in item:
                update(hasher, element)
            hasher.update(b"]")
            return

        if item is None:
            hasher.update(b"None")
            return

        hasher.update(type(item).__name__.encode("utf-8"))
        hasher.update(repr(item).encode("utf-8"))

    hasher = hashlib.sha256()
    update(hasher, value)
    return hasher.hexdigest()[:truncate]
