"""ContextVar-based tokenize configuration for scopelex.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is read by every Tokenizer created in the context; grammars stay
immutable and configuration-free so they can be shared freely.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from scopelex.config import TokenizeConfig, tokenize_config_context

    with tokenize_config_context(TokenizeConfig(fallback_scope="invalid.illegal")):
        tokens = list(Tokenizer(grammar, source).tokenize())

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TokenizeConfig:
    """Immutable tokenize configuration.

    Frozen dataclass ensures thread-safety (immutable after creation).

    Attributes:
        fallback_scope: Extra scope given to characters no rule matched
        flag_unbalanced_pops: Mark pops in the entry context as INVALID tokens
            and report them; when False they are emitted as plain tokens
        include_grammar_scope: Prefix every token's scopes with the grammar scope
        max_line_length: Lines longer than this are not matched; their text
            is emitted as one fallback token (None = no limit)

    """

    fallback_scope: str | None = None
    flag_unbalanced_pops: bool = True
    include_grammar_scope: bool = True
    max_line_length: int | None = None

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "TokenizeConfig":
        """Create TokenizeConfig from dictionary.

        Only includes keys that are valid TokenizeConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = TokenizeConfig.from_dict({
            ...     "fallback_scope": "invalid.illegal",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.fallback_scope
            'invalid.illegal'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: TokenizeConfig = TokenizeConfig()

_tokenize_config: ContextVar[TokenizeConfig] = ContextVar(
    "tokenize_config",
    default=_DEFAULT_CONFIG,
)


def get_tokenize_config() -> TokenizeConfig:
    """Get current tokenize configuration (thread-local)."""
    return _tokenize_config.get()


def set_tokenize_config(config: TokenizeConfig) -> None:
    """Set tokenize configuration for current context.

    Args:
        config: TokenizeConfig instance to use for this context.

    """
    _tokenize_config.set(config)


def reset_tokenize_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _tokenize_config.set(_DEFAULT_CONFIG)


@contextmanager
def tokenize_config_context(config: TokenizeConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: TokenizeConfig to use within the context.

    Example:
        >>> with tokenize_config_context(TokenizeConfig(max_line_length=200)):
        ...     tokens = list(Tokenizer(grammar, source).tokenize())
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _tokenize_config.get()
    _tokenize_config.set(config)
    try:
        yield
    finally:
        _tokenize_config.set(previous)


__all__ = [
    "TokenizeConfig",
    "get_tokenize_config",
    "set_tokenize_config",
    "reset_tokenize_config",
    "tokenize_config_context",
]
