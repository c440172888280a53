from __future__ import annotations

import pytest

from cborscope import decode
from cborscope.navigate import (
    find_path,
    format_path,
    get,
    is_collection,
    node_at,
    node_span,
    span_hex,
    walk,
)
from cborscope.span import Span
from cborscope.tests import hx

DATA = hx("83 01 6161 a1 616b f5")


@pytest.fixture()
def docs():
    return decode(DATA)


def test_walk_is_depth_first_in_input_order(docs) -> None:
    paths = [format_path(p) for p, _ in walk(docs)]
    assert paths == [
        "[0]",
        "[0].array[0]",
        "[0].array[1]",
        "[0].array[2]",
        "[0].array[2].map[0].key",
        "[0].array[2].map[0].value",
    ]


def test_walk_covers_tags_and_sequences() -> None:
    docs = decode(hx("c1 01 02"))
    assert [format_path(p) for p, _ in walk(docs)] == ["[0]", "[0].tag.value", "[1]"]


def test_find_path_by_header_span(docs) -> None:
    assert find_path(docs, Span(7, 1)) == ["[0]", "array[2]", "map[0].value"]
    assert find_path(docs, Span(4, 1)) == ["[0]", "array[2]"]
    assert find_path(docs, Span(4, 4)) is None


@pytest.mark.parametrize(
    "offset,path,kind",
    [
        (0, "[0]", "array"),
        (3, "[0].array[1]", "String"),
        (4, "[0].array[2]", "map"),
        (6, "[0].array[2].map[0].key", "String"),
        (7, "[0].array[2].map[0].value", "Bool"),
    ],
)
def test_node_at_returns_deepest_cover(docs, offset: int, path: str, kind: str) -> None:
    found = node_at(docs, offset)
    assert found is not None
    p, node = found
    assert format_path(p) == path
    assert node["type"] == kind


def test_node_at_past_end(docs) -> None:
    assert node_at(docs, len(DATA)) is None


def test_get_resolves_walk_paths(docs) -> None:
    for path, node in walk(docs):
        assert get(docs, path) is node
    with pytest.raises(KeyError):
        get(docs, ["[1]"])
    with pytest.raises(KeyError):
        get(docs, ["[0]", "map[0].key"])
    with pytest.raises(KeyError):
        get(docs, [])


def test_span_helpers(docs) -> None:
    m = get(docs, ["[0]", "array[2]"])
    assert is_collection(m)
    assert not is_collection(get(docs, ["[0]", "array[0]"]))
    assert node_span(m) == Span(4, 4)
    assert span_hex(DATA, node_span(m)) == "a1616bf5"
