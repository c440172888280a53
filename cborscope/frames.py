"""
Collection frames.

A `Frame` accumulates the children of one open array, map or tag while the
engine walks the flat token stream. The three kinds share one dataclass and
are dispatched on `Frame.kind`; the operation set is small and closed:

- add_value(value, value_span, is_finalizer=False)
- finalize_with(break_span)
- is_finished()
- close() -> (document, accumulated span)

Map children are kept as an ordered list of ``{"key": ..., "value": ...}``
pairs, never a dict: CBOR keys may repeat or be non-strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .builder import Document, position_document, tag_name, token_name
from .errors import (
    CollectionFull,
    MalformedStructure,
    TagAlreadySet,
    TagMissingValue,
)
from .span import Span
from .tokens import Token, TokenKind

INDEFINITE = "Indefinite"


class _Sentinel(Enum):
    UNSET = "unset"


_UNSET = _Sentinel.UNSET


class FrameKind(str, Enum):
    ARRAY = "array"
    MAP = "map"
    TAG = "tag"


@dataclass
class Frame:
    kind: FrameKind
    header: Span
    span: Span
    declared: Optional[int] = None
    count: int = 0
    children: List[Document] = field(default_factory=list)
    pending_key: Any = _UNSET
    tag: Optional[int] = None
    tag_value: Any = _UNSET

    # ---------------- construction ----------------

    @classmethod
    def root(cls) -> "Frame":
        """Synthetic indefinite array collecting every top-level item."""
        return cls(FrameKind.ARRAY, Span(0, 0), Span(0, 0))

    @classmethod
    def from_token(cls, token: Token) -> "Frame":
        span = token.span
        kind = token.kind
        if kind is TokenKind.BEGIN_ARRAY:
            return cls(FrameKind.ARRAY, span, span)
        if kind is TokenKind.ARRAY:
            return cls(FrameKind.ARRAY, span, span, declared=int(token.value))
        if kind is TokenKind.BEGIN_MAP:
            return cls(FrameKind.MAP, span, span)
        if kind is TokenKind.MAP:
            return cls(FrameKind.MAP, span, span, declared=int(token.value))
        if kind is TokenKind.TAG:
            return cls(FrameKind.TAG, span, span, tag=int(token.value))
        raise ValueError(f"{token_name(kind)} token does not open a collection")

    # ---------------- state ----------------

    @property
    def indefinite(self) -> bool:
        return self.kind is not FrameKind.TAG and self.declared is None

    @property
    def has_pending_key(self) -> bool:
        return self.pending_key is not _UNSET

    @property
    def has_tag_value(self) -> bool:
        return self.tag_value is not _UNSET

    def is_finished(self) -> bool:
        if self.kind is FrameKind.TAG:
            return self.has_tag_value
        if self.declared is None:
            return False
        return self.count >= self.declared

    # ---------------- mutation ----------------

    def _check_room(self) -> None:
        if self.declared is not None and self.count >= self.declared:
            raise CollectionFull(
                f"{self.kind.value} is full",
                data={"declared": self.declared, **self.header.to_document()},
            )

    def add_value(self, value: Document, value_span: Span, is_finalizer: bool = False) -> None:
        """
        Offer one child. All checks run before any mutation, so a rejected
        value leaves the frame as it was.

        `is_finalizer` adds a child without counting it. The engine never
        sets it: a Break goes through `finalize_with` instead.
        """
        if self.kind is FrameKind.ARRAY:
            self._check_room()
            self.children.append(value)
            self.span = self.span.extend(value_span)
            if not is_finalizer:
                self.count += 1
            return

        if self.kind is FrameKind.MAP:
            self._check_room()
            if not self.has_pending_key:
                # a key alone does not complete a pair
                self.pending_key = value
                return
            self.children.append({"key": self.pending_key, "value": value})
            self.span = self.span.extend(value_span)
            if not is_finalizer:
                self.count += 1
            self.pending_key = _UNSET
            return

        if self.has_tag_value:
            raise TagAlreadySet(
                f"tag {tag_name(int(self.tag))} already has a value",
                data={"tag": self.tag, **self.header.to_document()},
            )
        self.tag_value = value
        self.span = self.span.extend(value_span)

    def finalize_with(self, break_span: Span) -> None:
        """
        Absorb the Break marker that terminates an indefinite array or map.
        The marker widens the accumulated span but is not a child.
        """
        if not self.indefinite:
            raise MalformedStructure(
                f"break inside a definite {self.kind.value}",
                data=break_span.to_document(),
            )
        if self.kind is FrameKind.MAP and self.has_pending_key:
            raise MalformedStructure(
                "indefinite map closed with a key and no value",
                data=break_span.to_document(),
            )
        self.span = self.span.extend(break_span)

    # ---------------- rendering ----------------

    def close(self) -> Tuple[Dict[str, Any], Span]:
        if self.kind is FrameKind.TAG:
            if not self.has_tag_value:
                raise TagMissingValue(
                    f"tag {tag_name(int(self.tag))} has no value",
                    data={"tag": self.tag, **self.header.to_document()},
                )
            doc = {
                "type": "tag",
                "position_info": position_document(self.header),
                "struct_position_info": position_document(self.span),
                "tag": tag_name(int(self.tag)),
                "value": self.tag_value,
            }
            return doc, self.span

        doc = {
            "type": self.kind.value,
            "items": self.declared if self.declared is not None else INDEFINITE,
            "position_info": position_document(self.header),
            "struct_position_info": position_document(self.span),
            "values": list(self.children),
        }
        return doc, self.span

    def root_values(self) -> List[Document]:
        return list(self.children)


__all__ = ["Frame", "FrameKind", "INDEFINITE"]
