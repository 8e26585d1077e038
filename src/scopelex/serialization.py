"""Serialization — JSON round-trip for tokens, states, and documents.

Converts scopelex value objects to/from JSON-compatible dicts. Useful for:
- Persisting a LexState so a later session can resume mid-document
- Caching tokenized documents on disk
- Shipping token streams to a host process

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from scopelex.serialization import to_json, from_json

    state_json = to_json(tokenizer.state)
    resumed = Tokenizer(grammar, rest, state=from_json(state_json))

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from scopelex.diagnostics import Diagnostic, DiagnosticKind
from scopelex.document import TokenizedDocument
from scopelex.lexer.state import LexState
from scopelex.tokens import Token, TokenKind

Serializable = Token | LexState | Diagnostic | TokenizedDocument

_TYPES: dict[str, type] = {
    "Token": Token,
    "LexState": LexState,
    "Diagnostic": Diagnostic,
    "TokenizedDocument": TokenizedDocument,
}

# Cache fields never leave the process
_SKIPPED_FIELDS = {"_location_cache"}


def to_dict(obj: Serializable) -> dict[str, Any]:
    """Convert a scopelex value object to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.

    Raises:
        TypeError: If ``obj`` is not a serializable scopelex type.

    """
    type_name = type(obj).__name__
    if _TYPES.get(type_name) is not type(obj):
        msg = f"Cannot serialize {type_name}"
        raise TypeError(msg)

    result: dict[str, Any] = {"_type": type_name}
    for f in fields(obj):
        if f.name in _SKIPPED_FIELDS:
            continue
        result[f.name] = _serialize_value(getattr(obj, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, (Token, LexState, Diagnostic, TokenizedDocument)):
        return to_dict(value)
    if isinstance(value, (TokenKind, DiagnosticKind)):
        return value.name
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Serializable:
    """Reconstruct a value object from a dict produced by to_dict().

    Raises:
        ValueError: If ``_type`` is missing or unknown, or a field is invalid.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized object"
        raise ValueError(msg)

    cls = _TYPES.get(type_name)
    if cls is None:
        msg = f"Unknown type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name in _SKIPPED_FIELDS or f.name not in data:
            continue
        kwargs[f.name] = _deserialize_field(cls, f.name, data[f.name])

    try:
        return cls(**kwargs)
    except TypeError as e:
        msg = f"Invalid {type_name} data: {e}"
        raise ValueError(msg) from e


def _deserialize_field(cls: type, name: str, value: Any) -> Any:
    if cls is Token and name == "kind":
        return _enum_member(TokenKind, value)
    if cls is Diagnostic and name == "kind":
        return _enum_member(DiagnosticKind, value)
    return _deserialize_value(value)


def _enum_member(enum_cls: Any, name: Any) -> Any:
    try:
        return enum_cls[name]
    except KeyError:
        msg = f"Unknown {enum_cls.__name__}: {name!r}"
        raise ValueError(msg) from None


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        if value.get("_type") is not None:
            return from_dict(value)
        return value
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(obj: Serializable, *, indent: int | None = None) -> str:
    """Serialize a value object to a JSON string.

    Output is deterministic (sorted keys) for cache-key stability.

    """
    return json.dumps(to_dict(obj), sort_keys=True, indent=indent)


def from_json(data: str) -> Serializable:
    """Deserialize a value object from a JSON string (as produced by to_json)."""
    raw = json.loads(data)
    if not isinstance(raw, dict):
        msg = f"Expected a JSON object, got {type(raw).__name__}"
        raise ValueError(msg)
    return from_dict(raw)
