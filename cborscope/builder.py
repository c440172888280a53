"""
Document builder.

Turns tokens into the generic document shape:

    {"type": <token-kind-name>, "value": <decoded value>, "position_info": {...}}

Values are normalized: integers of every width become plain ``int``, floats
plain ``float``, byte strings lowercase hex, Undefined becomes None. Non-finite
floats are emitted as the string sentinels "NaN", "Infinity" and "-Infinity"
so that every document serializes as strict JSON.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from .errors import UnsupportedToken
from .span import Span
from .tokens import Token, TokenKind

Document = Any

# Registered tags with a well-known name (RFC 8949 §3.4).
TAG_NAMES: Dict[int, str] = {
    0: "DateTime",
    1: "Timestamp",
    2: "PosBignum",
    3: "NegBignum",
    4: "Decimal",
    5: "Bigfloat",
    21: "ToBase64Url",
    22: "ToBase64",
    23: "ToBase16",
    24: "Cbor",
    32: "Uri",
    33: "Base64Url",
    34: "Base64",
    35: "Regex",
    36: "Mime",
}

_TAG_NUMBERS = {name: num for num, name in TAG_NAMES.items()}

_INTEGER_KINDS = frozenset(
    {
        TokenKind.U8,
        TokenKind.U16,
        TokenKind.U32,
        TokenKind.U64,
        TokenKind.I8,
        TokenKind.I16,
        TokenKind.I32,
        TokenKind.I64,
        TokenKind.INT,
    }
)
_FLOAT_KINDS = frozenset({TokenKind.F16, TokenKind.F32, TokenKind.F64})


def token_name(kind: TokenKind) -> str:
    return kind.value


def tag_name(tag: int) -> str:
    return TAG_NAMES.get(tag, f"Unassigned({tag})")


def tag_number(name: str) -> Optional[int]:
    """Inverse of `tag_name`; None for names it never produces."""
    if name in _TAG_NUMBERS:
        return _TAG_NUMBERS[name]
    if name.startswith("Unassigned(") and name.endswith(")"):
        try:
            return int(name[len("Unassigned("):-1])
        except ValueError:
            return None
    return None


def float_value(f: float) -> Any:
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Infinity" if f > 0 else "-Infinity"
    return float(f)


def token_value(token: Token) -> Any:
    """
    Decoded scalar value of `token`. Structural tokens have none and raise
    UnsupportedToken.
    """
    kind = token.kind
    if kind in (TokenKind.NULL, TokenKind.UNDEFINED):
        return None
    if kind is TokenKind.BOOL:
        return bool(token.value)
    if kind in _INTEGER_KINDS:
        return int(token.value)
    if kind in _FLOAT_KINDS:
        return float_value(token.value)
    if kind is TokenKind.BYTES:
        return bytes(token.value).hex()
    if kind is TokenKind.STRING:
        return str(token.value)
    if kind is TokenKind.SIMPLE:
        return int(token.value)
    raise UnsupportedToken(
        f"{token_name(kind)} token is not a value",
        data={"type": token_name(kind), **token.span.to_document()},
    )


def position_document(span: Span) -> Dict[str, int]:
    return span.to_document()


def scalar_document(token: Token) -> Dict[str, Any]:
    return {
        "type": token_name(token.kind),
        "value": token_value(token),
        "position_info": position_document(token.span),
    }


__all__ = [
    "Document",
    "TAG_NAMES",
    "token_name",
    "tag_name",
    "tag_number",
    "float_value",
    "token_value",
    "position_document",
    "scalar_document",
]
