"""
cborscope: annotated CBOR decoding.

Decodes a CBOR byte buffer (one or more concatenated top-level items) into a
document tree in which every scalar and every array, map and tag carries the
byte span it occupies in the input.

    >>> from cborscope import decode
    >>> decode(bytes.fromhex("0102"))[1]
    {'type': 'U8', 'value': 2, 'position_info': {'offset': 1, 'length': 1}}

Public responsibilities:
- Tokenize CBOR with spans (`cborscope.tokens`).
- Rebuild the tree with an explicit frame stack (`cborscope.engine`).
- Navigate and render decoded documents (`cborscope.navigate`, `cborscope.render`).
"""

from __future__ import annotations

from .engine import decode, decode_tokens
from .errors import (
    CborScopeError,
    CollectionFull,
    InputError,
    LimitExceeded,
    MalformedStructure,
    TagAlreadySet,
    TagMissingValue,
    TokenSourceError,
    UnsupportedToken,
)
from .inputs import decode_text
from .span import Span
from .tokens import Token, TokenKind, iter_tokens
from .version import __version__

__all__ = [
    "__version__",
    "decode",
    "decode_text",
    "decode_tokens",
    "iter_tokens",
    "Span",
    "Token",
    "TokenKind",
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
