"""
Navigation over decoded documents.

Paths are lists of segments, the same ones the hex/tree views use to
cross-reference each other:

- ``[i]``           i-th top-level item
- ``array[i]``      i-th element of an array
- ``map[i].key``    key of the i-th pair of a map
- ``map[i].value``  value of the i-th pair of a map
- ``tag.value``     the value wrapped by a tag

Traversal uses an explicit stack, like the decoder, so it is safe on the
deepest trees the decoder can produce.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .span import Span

Path = List[str]


def is_collection(node: Any) -> bool:
    return isinstance(node, dict) and node.get("type") in ("array", "map", "tag")


def node_span(node: Dict[str, Any]) -> Span:
    """Full extent of a node: struct span for collections, own span otherwise."""
    info = node.get("struct_position_info") or node["position_info"]
    return Span.from_document(info)


def _children(node: Dict[str, Any]) -> List[Tuple[str, Any]]:
    kind = node.get("type")
    if kind == "array":
        return [(f"array[{i}]", v) for i, v in enumerate(node["values"])]
    if kind == "map":
        out: List[Tuple[str, Any]] = []
        for i, pair in enumerate(node["values"]):
            out.append((f"map[{i}].key", pair["key"]))
            out.append((f"map[{i}].value", pair["value"]))
        return out
    if kind == "tag":
        return [("tag.value", node["value"])]
    return []


def walk(documents: Sequence[Any]) -> Iterator[Tuple[Path, Dict[str, Any]]]:
    """Yield ``(path, node)`` for every node, depth-first, in input order."""
    stack: List[Tuple[Path, Any]] = [([f"[{i}]"], d) for i, d in enumerate(documents)]
    stack.reverse()
    while stack:
        path, node = stack.pop()
        yield path, node
        children = _children(node)
        for seg, child in reversed(children):
            stack.append((path + [seg], child))


def find_path(documents: Sequence[Any], span: Span) -> Optional[Path]:
    """Path of the first node whose own header span equals `span`."""
    for path, node in walk(documents):
        if Span.from_document(node["position_info"]) == span:
            return path
    return None


def node_at(documents: Sequence[Any], offset: int) -> Optional[Tuple[Path, Dict[str, Any]]]:
    """
    Deepest node covering byte `offset`. Sibling extents never overlap, so
    the covering nodes form one chain and the last one visited is deepest.
    """
    found: Optional[Tuple[Path, Dict[str, Any]]] = None
    for path, node in walk(documents):
        if node_span(node).covers(offset):
            found = (path, node)
    return found


def get(documents: Sequence[Any], path: Sequence[str]) -> Dict[str, Any]:
    """Resolve a path produced by `walk`; KeyError if it does not exist."""
    if not path:
        raise KeyError("empty path")
    head = path[0]
    if not (head.startswith("[") and head.endswith("]")):
        raise KeyError(head)
    try:
        node = documents[int(head[1:-1])]
    except (ValueError, IndexError) as e:
        raise KeyError(head) from e
    for seg in path[1:]:
        match = dict(_children(node)).get(seg)
        if match is None:
            raise KeyError(seg)
        node = match
    return node


def format_path(path: Sequence[str]) -> str:
    return ".".join(path)


def span_hex(data: bytes, span: Span) -> str:
    """Lowercase hex of the bytes covered by `span`."""
    return bytes(data[span.offset:span.end]).hex()


__all__ = [
    "Path",
    "is_collection",
    "node_span",
    "walk",
    "find_path",
    "node_at",
    "get",
    "format_path",
    "span_hex",
]
