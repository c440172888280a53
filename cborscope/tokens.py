"""
CBOR token source
-----------------

A flat, non-recursive tokenizer over a CBOR byte buffer (RFC 8949). Each call
to the iterator yields exactly one `Token`: a scalar, or a structural marker
(array/map header, indefinite opener, Break, tag). Nesting is *not* tracked
here; `cborscope.engine` rebuilds the tree from the flat stream.

Integer widths follow the encoded argument width:

- major 0 with a 0/1-byte argument -> U8, 2 -> U16, 4 -> U32, 8 -> U64
- major 1 picks the narrowest signed width that holds ``-1 - n`` starting
  from the encoded width (I8 .. I64); values below the int64 range become
  ``Int``.

Every token carries the `Span` it occupies. Byte/text string tokens span
their header *and* payload; array/map/tag headers span only the header.

Failures raise `TokenSourceError` with the offset of the offending item.

Public API:
- iter_tokens(data) -> Iterator[Token]
- tokenize(data) -> list[Token]
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from .errors import TokenSourceError
from .span import Span


class TokenKind(str, Enum):
    NULL = "Null"
    BOOL = "Bool"
    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    I8 = "I8"
    I16 = "I16"
    I32 = "I32"
    I64 = "I64"
    INT = "Int"
    F16 = "F16"
    F32 = "F32"
    F64 = "F64"
    BYTES = "Bytes"
    STRING = "String"
    SIMPLE = "Simple"
    UNDEFINED = "Undefined"
    BEGIN_ARRAY = "BeginArray"
    BEGIN_MAP = "BeginMap"
    BEGIN_STRING = "BeginString"
    BEGIN_BYTES = "BeginBytes"
    BREAK = "Break"
    ARRAY = "Array"
    MAP = "Map"
    TAG = "Tag"


# Tokens that open a collection frame in the engine.
OPENERS = frozenset(
    {TokenKind.BEGIN_ARRAY, TokenKind.BEGIN_MAP, TokenKind.ARRAY, TokenKind.MAP, TokenKind.TAG}
)


@dataclass(frozen=True)
class Token:
    """
    One decoded unit. `value` depends on `kind`:

    - scalars: the decoded Python value (bytes stay ``bytes``)
    - ARRAY / MAP: the declared element / pair count
    - TAG: the tag number
    - markers (Begin*, Break): None
    """
    kind: TokenKind
    value: Any
    span: Span

    @property
    def is_opener(self) -> bool:
        return self.kind in OPENERS

    @property
    def is_break(self) -> bool:
        return self.kind is TokenKind.BREAK


_I8_MAX = 0x7F
_I16_MAX = 0x7FFF
_I32_MAX = 0x7FFFFFFF
_I64_MAX = 0x7FFFFFFFFFFFFFFF

_INDEFINITE = 31


class _Buf:
    __slots__ = ("b", "i", "n")

    def __init__(self, b: bytes):
        self.b = memoryview(b)
        self.i = 0
        self.n = len(b)

    def get(self, k: int, *, start: int) -> bytes:
        if self.i + k > self.n:
            raise TokenSourceError(
                f"truncated: need {k} byte(s) at offset {self.i}, have {self.n - self.i}",
                offset=start,
            )
        out = self.b[self.i:self.i + k].tobytes()
        self.i += k
        return out

    def get1(self, *, start: int) -> int:
        if self.i >= self.n:
            raise TokenSourceError(f"truncated at offset {self.i}", offset=start)
        v = self.b[self.i]
        self.i += 1
        return int(v)


def _read_arg(buf: _Buf, ai: int, start: int) -> Tuple[Optional[int], int]:
    """
    Read the argument for additional-info `ai`. Returns (value, width in bytes);
    value is None for the indefinite marker (ai == 31).
    """
    if ai < 24:
        return ai, 0
    if ai == 24:
        return buf.get1(start=start), 1
    if ai == 25:
        return int.from_bytes(buf.get(2, start=start), "big"), 2
    if ai == 26:
        return int.from_bytes(buf.get(4, start=start), "big"), 4
    if ai == 27:
        return int.from_bytes(buf.get(8, start=start), "big"), 8
    if ai == _INDEFINITE:
        return None, 0
    raise TokenSourceError(f"reserved additional info {ai}", offset=start)


_UINT_KIND = {0: TokenKind.U8, 1: TokenKind.U8, 2: TokenKind.U16, 4: TokenKind.U32, 8: TokenKind.U64}


def _nint_kind(n: int, width: int) -> TokenKind:
    if width <= 1 and n <= _I8_MAX:
        return TokenKind.I8
    if width <= 2 and n <= _I16_MAX:
        return TokenKind.I16
    if width <= 4 and n <= _I32_MAX:
        return TokenKind.I32
    if n <= _I64_MAX:
        return TokenKind.I64
    return TokenKind.INT


def _next_token(buf: _Buf) -> Token:
    start = buf.i
    ib = buf.get1(start=start)
    major = ib >> 5
    ai = ib & 0x1F

    def done(kind: TokenKind, value: Any = None) -> Token:
        return Token(kind, value, Span(start, buf.i - start))

    if major == 7:
        return _simple_or_float(buf, ai, start, done)

    arg, width = _read_arg(buf, ai, start)

    if major == 0:
        if arg is None:
            raise TokenSourceError("indefinite length not allowed for unsigned integer", offset=start)
        return done(_UINT_KIND[width], arg)
    if major == 1:
        if arg is None:
            raise TokenSourceError("indefinite length not allowed for negative integer", offset=start)
        return done(_nint_kind(arg, width), -1 - arg)
    if major == 2:
        if arg is None:
            return done(TokenKind.BEGIN_BYTES)
        return done(TokenKind.BYTES, buf.get(arg, start=start))
    if major == 3:
        if arg is None:
            return done(TokenKind.BEGIN_STRING)
        raw = buf.get(arg, start=start)
        try:
            text = raw.decode("utf-8", "strict")
        except UnicodeDecodeError as e:
            raise TokenSourceError(f"invalid UTF-8: {e}", offset=start) from e
        return done(TokenKind.STRING, text)
    if major == 4:
        if arg is None:
            return done(TokenKind.BEGIN_ARRAY)
        return done(TokenKind.ARRAY, arg)
    if major == 5:
        if arg is None:
            return done(TokenKind.BEGIN_MAP)
        return done(TokenKind.MAP, arg)
    # major == 6
    if arg is None:
        raise TokenSourceError("indefinite length not allowed for tag", offset=start)
    return done(TokenKind.TAG, arg)


def _simple_or_float(buf: _Buf, ai: int, start: int, done) -> Token:
    if ai < 20:
        return done(TokenKind.SIMPLE, ai)
    if ai == 20:
        return done(TokenKind.BOOL, False)
    if ai == 21:
        return done(TokenKind.BOOL, True)
    if ai == 22:
        return done(TokenKind.NULL)
    if ai == 23:
        return done(TokenKind.UNDEFINED)
    if ai == 24:
        v = buf.get1(start=start)
        if v < 32:
            raise TokenSourceError(f"invalid two-byte simple value {v}", offset=start)
        return done(TokenKind.SIMPLE, v)
    if ai == 25:
        return done(TokenKind.F16, struct.unpack(">e", buf.get(2, start=start))[0])
    if ai == 26:
        return done(TokenKind.F32, struct.unpack(">f", buf.get(4, start=start))[0])
    if ai == 27:
        return done(TokenKind.F64, struct.unpack(">d", buf.get(8, start=start))[0])
    if ai == _INDEFINITE:
        return done(TokenKind.BREAK)
    raise TokenSourceError(f"reserved simple/float additional info {ai}", offset=start)


def iter_tokens(data: bytes) -> Iterator[Token]:
    """
    Yield tokens in input order until the buffer is exhausted. An empty
    buffer yields nothing.
    """
    buf = _Buf(bytes(data))
    while buf.i < buf.n:
        yield _next_token(buf)


def tokenize(data: bytes) -> List[Token]:
    return list(iter_tokens(data))


__all__ = ["TokenKind", "Token", "OPENERS", "iter_tokens", "tokenize"]
