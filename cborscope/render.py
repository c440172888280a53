"""
Human-readable rendering of decoded documents with rich.

Each node gets a short label (type, value summary, optional detail) and its
byte span; tags also get a description of well-known tag numbers, including
the Cardano ones (Plutus constructors, sets).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich.text import Text
from rich.tree import Tree

from .builder import tag_number
from .frames import INDEFINITE
from .navigate import node_span

TAG_DESCRIPTIONS: Dict[int, str] = {
    0: "date/time string",
    1: "epoch timestamp",
    2: "positive bignum",
    3: "negative bignum",
    4: "decimal fraction",
    5: "bigfloat",
    21: "base64url",
    22: "base64",
    23: "base16",
    24: "encoded CBOR",
    32: "URI",
    33: "base64url string",
    34: "base64 string",
    35: "regex",
    36: "MIME message",
    55799: "self-describe CBOR",
    121: "Plutus data (constr 0)",
    122: "Plutus data (constr 1)",
    123: "Plutus data (constr 2)",
    124: "Plutus data (constr 3)",
    125: "Plutus data (constr 4)",
    126: "Plutus data (constr 5)",
    127: "Plutus data (constr 6)",
    258: "set",
    259: "map (preserve order)",
}

_SCALAR_LABELS: Dict[str, Tuple[str, str]] = {
    "Null": ("null", "grey50"),
    "Undefined": ("undefined", "grey50"),
    "Bool": ("bool", "blue"),
    "U8": ("uint8", "yellow"),
    "U16": ("uint16", "yellow"),
    "U32": ("uint32", "yellow"),
    "U64": ("uint64", "yellow"),
    "I8": ("nint8", "dark_orange"),
    "I16": ("nint16", "dark_orange"),
    "I32": ("nint32", "dark_orange"),
    "I64": ("nint64", "dark_orange"),
    "Int": ("bigint", "orange3"),
    "F16": ("float16", "green"),
    "F32": ("float32", "green"),
    "F64": ("float64", "green"),
}


@dataclass(frozen=True)
class Label:
    type: str
    value: str
    color: str
    detail: Optional[str] = None


def describe_tag(tag: int) -> Optional[str]:
    return TAG_DESCRIPTIONS.get(tag)


def _fmt(val: Any) -> str:
    if val is None:
        return "null"
    if isinstance(val, bool):
        return "true" if val else "false"
    return str(val)


def node_label(node: Dict[str, Any]) -> Label:
    kind = node.get("type")
    if kind in ("array", "map"):
        indefinite = node["items"] == INDEFINITE
        count = "∞" if indefinite else str(node["items"])
        noun = "items" if kind == "array" else "entries"
        return Label(
            f"{kind} (indefinite)" if indefinite else kind,
            f"{count} {noun}",
            "red" if kind == "array" else "orange1",
        )
    if kind == "tag":
        num = tag_number(node["tag"])
        return Label(
            "tag",
            f"#{num}" if num is not None else str(node["tag"]),
            "magenta",
            describe_tag(num) if num is not None else None,
        )
    if kind == "Bytes":
        return Label("bytes", f"{len(node['value']) // 2} bytes", "cyan", node["value"] or None)
    if kind == "String":
        return Label("tstr", f"{len(node['value'])} chars", "green", f'"{node["value"]}"')
    if kind == "Simple":
        return Label(f"simple({_fmt(node['value'])})", "", "grey50")
    if kind in _SCALAR_LABELS:
        name, color = _SCALAR_LABELS[kind]
        value = "" if kind in ("Null", "Undefined") else _fmt(node["value"])
        return Label(name, value, color)
    return Label("unknown", _fmt(node.get("value")), "grey50")


def label_text(node: Dict[str, Any], prefix: str = "") -> Text:
    lab = node_label(node)
    span = node_span(node)
    t = Text()
    if prefix:
        t.append(f"{prefix} ", style="bold")
    t.append(lab.type, style=lab.color)
    if lab.value:
        t.append(f" {lab.value}")
    if lab.detail:
        t.append(f" {lab.detail}", style="dim")
    t.append(f"  @{span.offset}+{span.length}", style="grey50")
    return t


def build_tree(documents: Sequence[Any], title: str = "CBOR") -> Tree:
    """Build a rich Tree for the decoded sequence without recursion."""
    root = Tree(Text(title, style="bold"))
    stack: List[Tuple[Tree, str, Dict[str, Any]]] = [
        (root, f"[{i}]", d) for i, d in enumerate(documents)
    ]
    stack.reverse()
    while stack:
        parent, prefix, node = stack.pop()
        branch = parent.add(label_text(node, prefix))
        kind = node.get("type")
        if kind == "array":
            children = [(f"{i}:", v) for i, v in enumerate(node["values"])]
        elif kind == "map":
            children = []
            for pair in node["values"]:
                children.append(("key:", pair["key"]))
                children.append(("value:", pair["value"]))
        elif kind == "tag":
            children = [("value:", node["value"])]
        else:
            children = []
        for seg, child in reversed(children):
            stack.append((branch, seg, child))
    return root


__all__ = ["TAG_DESCRIPTIONS", "Label", "describe_tag", "node_label", "label_text", "build_tree"]
