from __future__ import annotations

import json

from typer.testing import CliRunner

from cborscope.cli.main import app
from cborscope.config import LimitsConfig, get_config
from cborscope.version import __version__

runner = CliRunner()

SAMPLE_HEX = "83016161a1616bf5"


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_decode_prints_json() -> None:
    result = runner.invoke(app, ["decode", SAMPLE_HEX, "--compact"])
    assert result.exit_code == 0, result.output
    docs = json.loads(result.stdout)
    assert docs[0]["type"] == "array"
    assert docs[0]["values"][2]["values"][0]["value"]["value"] is True


def test_decode_base64_and_file(tmp_path) -> None:
    from_b64 = runner.invoke(app, ["decode", "gwFhYaFha/U="])
    assert from_b64.exit_code == 0
    path = tmp_path / "sample.cbor"
    path.write_bytes(bytes.fromhex(SAMPLE_HEX))
    from_file = runner.invoke(app, ["decode", "--in", str(path)])
    assert from_file.exit_code == 0
    assert json.loads(from_b64.stdout) == json.loads(from_file.stdout)


def test_decode_from_stdin() -> None:
    result = runner.invoke(app, ["decode", "--in", "-", "--compact"], input=bytes.fromhex("0102"))
    assert result.exit_code == 0
    assert [d["value"] for d in json.loads(result.stdout)] == [1, 2]


def test_decode_error_exit_code() -> None:
    result = runner.invoke(app, ["decode", "8201"])
    assert result.exit_code == 1
    assert "malformed_structure" in result.output


def test_json_errors_flag() -> None:
    result = runner.invoke(app, ["--json-errors", "decode", "c1"])
    assert result.exit_code == 1
    assert '"urn:cborscope:tag_missing_value"' in result.output


def test_usage_errors() -> None:
    assert runner.invoke(app, ["decode"]).exit_code == 2
    assert runner.invoke(app, ["decode", "zz!"]).exit_code == 2
    assert runner.invoke(app, ["locate", SAMPLE_HEX, "--offset", "99"]).exit_code == 2


def test_tree() -> None:
    result = runner.invoke(app, ["tree", SAMPLE_HEX])
    assert result.exit_code == 0
    assert "array 3 items" in result.output
    assert "bool true" in result.output


def test_locate() -> None:
    result = runner.invoke(app, ["locate", SAMPLE_HEX, "--offset", "6"])
    assert result.exit_code == 0
    assert "path: [0].array[2].map[0].key" in result.output
    assert "hex: 616b" in result.output


def test_tokens() -> None:
    result = runner.invoke(app, ["tokens", "9f0102ff"])
    assert result.exit_code == 0
    for kind in ("BeginArray", "U8", "Break"):
        assert kind in result.output


def test_tokens_reports_tokenizer_errors() -> None:
    result = runner.invoke(app, ["tokens", "1901"])
    assert result.exit_code == 1
    assert "token_source" in result.output


DEFAULT_DEPTH = LimitsConfig().max_depth


def test_decode_at_default_depth_limit() -> None:
    nested_arrays = "81" * DEFAULT_DEPTH + "01"
    nested_maps = "a101" * DEFAULT_DEPTH + "01"
    for text in (nested_arrays, nested_maps):
        for extra in ([], ["--compact"]):
            result = runner.invoke(app, ["decode", text, *extra])
            assert result.exit_code == 0, result.output
            assert json.loads(result.stdout)[0]["items"] == 1


def test_decode_past_default_depth_limit() -> None:
    result = runner.invoke(app, ["decode", "81" * (DEFAULT_DEPTH + 1) + "01"])
    assert result.exit_code == 1
    assert "limit_exceeded" in result.output


def test_decode_too_deep_to_render(monkeypatch) -> None:
    monkeypatch.setenv("CBORSCOPE_MAX_DEPTH", "100000")
    get_config.cache_clear()
    result = runner.invoke(app, ["decode", "81" * 5000 + "01"])
    assert result.exit_code == 1
    assert "limit_exceeded" in result.output
    assert not isinstance(result.exception, RecursionError)


def test_bad_environment_is_a_usage_error(monkeypatch) -> None:
    monkeypatch.setenv("CBORSCOPE_MAX_DEPTH", "deep")
    get_config.cache_clear()
    result = runner.invoke(app, ["decode", "01"])
    assert result.exit_code == 2
    assert "CBORSCOPE_MAX_DEPTH" in result.output
