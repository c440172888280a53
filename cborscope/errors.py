"""
cborscope errors.

Lightweight, typed exception hierarchy with structured metadata suitable for
CLI rendering or embedding callers.

Usage:

    from cborscope.errors import CollectionFull, MalformedStructure

    raise CollectionFull("array is full", data={"declared": 2})

All errors expose:
- .code   : stable machine-readable code (snake_case)
- .data   : optional structured payload (dict-like)
- .to_problem() : RFC 7807-compatible dict for JSON output

Every decode error is fatal to the current decode call; nothing here is
retryable.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class CborScopeError(Exception):
    """
    Base class for cborscope errors.

    Subclasses set `default_code`.
    """
    default_code = "cborscope_error"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.data: Dict[str, Any] = dict(data) if data else {}

    def __str__(self) -> str:
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code

    def to_problem(self) -> Dict[str, Any]:
        """
        Render as an RFC 7807 "problem detail" object.
        """
        return {
            "type": f"urn:cborscope:{self.code}",
            "title": self.code.replace("_", " ").title(),
            "detail": self.message or None,
            "data": self.data or None,
        }


class TokenSourceError(CborScopeError):
    """
    The tokenizer rejected the bytes (truncated input, reserved initial byte,
    invalid UTF-8 in a text string, ...).
    """
    default_code = "token_source"

    def __init__(self, message: str = "", *, offset: Optional[int] = None, **kw: Any) -> None:
        data = dict(kw.pop("data", None) or {})
        if offset is not None:
            data.setdefault("offset", offset)
        super().__init__(message, data=data, **kw)
        self.offset = offset


class CollectionFull(CborScopeError):
    """More children supplied than a definite-length array/map declared."""
    default_code = "collection_full"


class TagAlreadySet(CborScopeError):
    """A second value offered to a tag that already holds one."""
    default_code = "tag_already_set"


class TagMissingValue(CborScopeError):
    """A tag closed without ever receiving its value."""
    default_code = "tag_missing_value"


class MalformedStructure(CborScopeError):
    """
    The token stream does not collapse to the single root frame: unbalanced
    Break markers, a truncated collection, or a dangling map key.
    """
    default_code = "malformed_structure"


class UnsupportedToken(CborScopeError):
    """A token kind with no representable scalar value reached the scalar path."""
    default_code = "unsupported_token"


class InputError(CborScopeError):
    """Text input is neither hex nor base64."""
    default_code = "invalid_input"


class LimitExceeded(CborScopeError):
    """A caller-side resource limit (input size, nesting depth) was exceeded."""
    default_code = "limit_exceeded"


__all__ = [
    "CborScopeError",
    "TokenSourceError",
    "CollectionFull",
    "TagAlreadySet",
    "TagMissingValue",
    "MalformedStructure",
    "UnsupportedToken",
    "InputError",
    "LimitExceeded",
]
