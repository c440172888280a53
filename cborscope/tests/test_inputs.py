from __future__ import annotations

import pytest

from cborscope.config import Config, LimitsConfig
from cborscope.errors import InputError, LimitExceeded
from cborscope.inputs import decode_bytes, decode_text, looks_like_base64, parse_hex, parse_input
from cborscope.tests import hx

SAMPLE = hx("83 01 6161 a1 616b f5")


@pytest.mark.parametrize(
    "text",
    [
        "83016161a1616bf5",
        "0x83016161A1616BF5",
        "  83 01 61 61\n a1 61 6b f5  ",
        "8301_6161_a161_6bf5",
    ],
)
def test_hex_forms(text: str) -> None:
    assert parse_input(text) == (SAMPLE, "hex")


def test_base64_is_detected_and_converted() -> None:
    assert parse_input("gwFhYaFha/U=") == (SAMPLE, "base64")
    # missing padding is tolerated
    assert parse_input("AQI") == (hx("0102"), "base64")
    assert looks_like_base64("AQID")


def test_hex_is_never_read_as_base64() -> None:
    assert not looks_like_base64("abcd")
    assert not looks_like_base64("0xabcd")
    assert not looks_like_base64("")
    assert parse_input("abcd") == (hx("abcd"), "hex")


@pytest.mark.parametrize("text", ["zz!", "830", "0x12 3"])
def test_invalid_text(text: str) -> None:
    with pytest.raises(InputError):
        parse_input(text)


def test_parse_hex_rejects_odd_length() -> None:
    with pytest.raises(InputError) as ei:
        parse_hex("abc")
    assert ei.value.data == {"digits": 3}


def test_decode_text_matches_decode_bytes() -> None:
    assert decode_text("gwFhYaFha/U=") == decode_bytes(SAMPLE)
    assert decode_text("") == []


def test_input_size_limit() -> None:
    cfg = Config(limits=LimitsConfig(max_input_bytes=1))
    assert decode_text("01", cfg) == decode_text("01")
    with pytest.raises(LimitExceeded) as ei:
        decode_text("0102", cfg)
    assert ei.value.data["size"] == 2


def test_depth_limit_from_config() -> None:
    cfg = Config(limits=LimitsConfig(max_depth=1))
    assert decode_bytes(hx("81 01"), cfg)[0]["items"] == 1
    with pytest.raises(LimitExceeded):
        decode_bytes(hx("81 81 01"), cfg)
