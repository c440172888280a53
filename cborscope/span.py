"""
Byte spans.

A `Span` is a half-open range ``[offset, offset + length)`` inside the input
buffer. Frames grow their accumulated span with `Span.extend` each time a
child (or the closing Break marker) lands in them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Span:
    offset: int
    length: int

    def __post_init__(self) -> None:
        if self.offset < 0 or self.length < 0:
            raise ValueError(f"span must be non-negative: offset={self.offset} length={self.length}")

    @property
    def end(self) -> int:
        return self.offset + self.length

    def extend(self, incoming: "Span") -> "Span":
        """
        Grow this span so it also ends where `incoming` ends. The start never
        moves; a contained `incoming` returns self unchanged.
        """
        if incoming.end <= self.end:
            return self
        return Span(self.offset, incoming.end - self.offset)

    def contains(self, other: "Span") -> bool:
        return self.offset <= other.offset and other.end <= self.end

    def covers(self, offset: int) -> bool:
        return self.offset <= offset < self.end

    def to_document(self) -> Dict[str, int]:
        return {"offset": self.offset, "length": self.length}

    @classmethod
    def from_document(cls, doc: Dict[str, int]) -> "Span":
        return cls(int(doc["offset"]), int(doc["length"]))


def extend(base: Span, incoming: Span) -> Span:
    """Functional alias of `Span.extend`."""
    return base.extend(incoming)


__all__ = ["Span", "extend"]
