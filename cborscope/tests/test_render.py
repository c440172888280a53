from __future__ import annotations

import cbor2
from rich.console import Console

from cborscope import decode
from cborscope.render import build_tree, describe_tag, label_text, node_label
from cborscope.tests import hx


def render(docs) -> str:
    console = Console(record=True, width=200, color_system=None)
    console.print(build_tree(docs))
    return console.export_text()


def test_scalar_labels() -> None:
    docs = decode(hx("18 ff 38 80 3b ffffffffffffffff f9 3c00 43 010203 62 6869 f6 f7 e5"))
    labels = [node_label(d) for d in docs]
    assert [(lab.type, lab.value) for lab in labels] == [
        ("uint8", "255"),
        ("nint16", "-129"),
        ("bigint", "-18446744073709551616"),
        ("float16", "1.0"),
        ("bytes", "3 bytes"),
        ("tstr", "2 chars"),
        ("null", ""),
        ("undefined", ""),
        ("simple(5)", ""),
    ]
    assert labels[4].detail == "010203"
    assert labels[5].detail == '"hi"'


def test_collection_and_tag_labels() -> None:
    docs = decode(hx("82 01 02 9f ff bf ff") + cbor2.dumps(cbor2.CBORTag(121, [])) + cbor2.dumps(cbor2.CBORTag(9999, 0)))
    arr, indef_arr, indef_map, plutus, unknown = (node_label(d) for d in docs)
    assert (arr.type, arr.value) == ("array", "2 items")
    assert (indef_arr.type, indef_arr.value) == ("array (indefinite)", "∞ items")
    assert (indef_map.type, indef_map.value) == ("map (indefinite)", "∞ entries")
    assert (plutus.type, plutus.value, plutus.detail) == ("tag", "#121", "Plutus data (constr 0)")
    assert (unknown.value, unknown.detail) == ("#9999", None)


def test_describe_tag() -> None:
    assert describe_tag(24) == "encoded CBOR"
    assert describe_tag(258) == "set"
    assert describe_tag(7) is None


def test_label_text_carries_span() -> None:
    (doc,) = decode(hx("83 01 6161 a1 616b f5"))
    assert label_text(doc).plain == "array 3 items  @0+8"
    assert label_text(doc["values"][1], "1:").plain == '1: tstr 1 chars "a"  @2+2'


def test_tree_lists_every_node() -> None:
    out = render(decode(hx("83 01 6161 a1 616b f5 c1 00")))
    for needle in ("[0] array 3 items", "0: uint8 1", "1: tstr", "2: map 1 entries", "key: tstr", "value: bool true", "[1] tag #1 epoch timestamp", "value: uint8 0"):
        assert needle in out
    assert out.index("key: tstr") < out.index("value: bool true")
