"""
Text input handling.

Users paste CBOR as hex (``0x`` prefix, mixed case, whitespace and ``_``
separators tolerated) or as standard-alphabet base64. Base64 is recognised
only when the text contains characters that cannot appear in hex, so a hex
string is never misread as base64.

`decode_text` is the caller-side entry point: it normalizes the text,
enforces the configured limits, then runs the decoder.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import List, Optional, Tuple

from . import logging as clog
from .builder import Document
from .config import Config, get_config
from .engine import decode
from .errors import InputError, LimitExceeded

log = clog.get_logger(__name__)

_HEX_RE = re.compile(r"^[0-9a-f]*$")
_B64_RE = re.compile(r"^[A-Za-z0-9+/]+=*$")
_NON_HEX_B64 = re.compile(r"[g-zG-Z+/=]")
_SEPARATORS = re.compile(r"[\s_]")


def looks_like_base64(text: str) -> bool:
    t = re.sub(r"\s", "", text)
    if not t or not _B64_RE.match(t) or not _NON_HEX_B64.search(t):
        return False
    if t.lower().startswith("0x") and _HEX_RE.match(_SEPARATORS.sub("", t[2:]).lower()):
        return False
    try:
        _b64decode(t)
    except (binascii.Error, ValueError):
        return False
    return True


def _b64decode(t: str) -> bytes:
    padded = t.rstrip("=") + "=" * (-len(t.rstrip("=")) % 4)
    return base64.b64decode(padded, validate=True)


def parse_hex(text: str) -> bytes:
    h = _SEPARATORS.sub("", text).lower()
    if h.startswith("0x"):
        h = h[2:]
    if not _HEX_RE.match(h):
        raise InputError("invalid hex: unexpected characters")
    if len(h) % 2:
        raise InputError("invalid hex: odd number of digits", data={"digits": len(h)})
    return bytes.fromhex(h)


def parse_input(text: str) -> Tuple[bytes, str]:
    """
    Normalize pasted text into bytes. Returns (data, detected format) where
    the format is "hex" or "base64".
    """
    stripped = text.strip()
    if looks_like_base64(stripped):
        return _b64decode(re.sub(r"\s", "", stripped)), "base64"
    return parse_hex(stripped), "hex"


def check_limits(data: bytes, cfg: Optional[Config] = None) -> None:
    cfg = cfg or get_config()
    if len(data) > cfg.limits.max_input_bytes:
        raise LimitExceeded(
            f"input is {len(data)} bytes, limit is {cfg.limits.max_input_bytes}",
            data={"size": len(data), "max_input_bytes": cfg.limits.max_input_bytes},
        )


def decode_bytes(data: bytes, cfg: Optional[Config] = None) -> List[Document]:
    """Decode raw bytes under the configured input size and depth limits."""
    cfg = cfg or get_config()
    check_limits(data, cfg)
    docs = decode(data, max_depth=cfg.limits.max_depth)
    log.debug("decoded", extra={"size": len(data), "items": len(docs)})
    return docs


def decode_text(text: str, cfg: Optional[Config] = None) -> List[Document]:
    """Decode hex or base64 text (the web tool's ``cbor_to_json`` surface)."""
    data, fmt = parse_input(text)
    if fmt == "base64":
        log.info("input detected as base64", extra={"size": len(data)})
    return decode_bytes(data, cfg)


__all__ = [
    "looks_like_base64",
    "parse_hex",
    "parse_input",
    "check_limits",
    "decode_bytes",
    "decode_text",
]
