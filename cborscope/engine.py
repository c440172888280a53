"""
Decoder engine
--------------

Rebuilds the annotated document tree from the flat token stream using an
explicit frame stack instead of recursion, so deeply nested untrusted input
never touches the interpreter's recursion limit.

The stack is seeded with a synthetic, indefinite root array that collects
every top-level item of the CBOR sequence. For each token:

1. collapse: pop and fold every frame that reports `is_finished()`
2. Break: pop the innermost indefinite array/map, absorb the marker's span,
   close it and fold the result into the new top frame
3. collapse again
4. openers (array/map headers, indefinite openers, tags) push a new frame
5. anything else is a scalar and is added to the top frame

After the stream ends the stack must collapse to the root alone. The result
is the root's plain child list.

Public API:
- decode(data, *, max_depth=None) -> list
- decode_tokens(tokens, *, max_depth=None) -> list
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .builder import Document, scalar_document
from .errors import LimitExceeded, MalformedStructure, TagMissingValue
from .frames import Frame, FrameKind
from .tokens import Token, iter_tokens


def collapse(stack: List[Frame]) -> None:
    """Fold finished frames into their parents until the top frame is open."""
    while len(stack) > 1 and stack[-1].is_finished():
        frame = stack.pop()
        doc, span = frame.close()
        stack[-1].add_value(doc, span)


def _close_on_break(stack: List[Frame], token: Token) -> None:
    if len(stack) == 1:
        raise MalformedStructure(
            "break with no open indefinite collection",
            data=token.span.to_document(),
        )
    frame = stack[-1]
    if frame.kind is FrameKind.TAG:
        raise TagMissingValue(
            "break reached a tag with no value",
            data={"tag": frame.tag, **token.span.to_document()},
        )
    frame.finalize_with(token.span)
    stack.pop()
    doc, span = frame.close()
    # the closed collection is an ordinary, counted child of its parent
    stack[-1].add_value(doc, span)


def decode_tokens(tokens: Iterable[Token], *, max_depth: Optional[int] = None) -> List[Document]:
    """
    Run the frame-stack state machine over `tokens`.

    `max_depth` bounds the number of simultaneously open collections (the
    root is not counted); exceeding it raises LimitExceeded.
    """
    stack: List[Frame] = [Frame.root()]

    for token in tokens:
        collapse(stack)

        if token.is_break:
            _close_on_break(stack, token)
            continue

        collapse(stack)

        if token.is_opener:
            if max_depth is not None and len(stack) > max_depth:
                raise LimitExceeded(
                    f"nesting deeper than {max_depth}",
                    data={"max_depth": max_depth, **token.span.to_document()},
                )
            stack.append(Frame.from_token(token))
            continue

        stack[-1].add_value(scalar_document(token), token.span)

    collapse(stack)

    if len(stack) != 1:
        top = stack[-1]
        if top.kind is FrameKind.TAG and not top.has_tag_value:
            raise TagMissingValue(
                "input ended inside a tag with no value",
                data={"tag": top.tag, "open_frames": len(stack) - 1},
            )
        raise MalformedStructure(
            "input ended with unclosed collections",
            data={"open_frames": len(stack) - 1, **top.header.to_document()},
        )

    return stack[0].root_values()


def decode(data: bytes, *, max_depth: Optional[int] = None) -> List[Document]:
    """
    Decode a CBOR sequence into a list of annotated documents, one per
    top-level item. An empty buffer yields an empty list.
    """
    return decode_tokens(iter_tokens(data), max_depth=max_depth)


__all__ = ["decode", "decode_tokens", "collapse"]
