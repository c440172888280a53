from __future__ import annotations

import io
import json

from cborscope import logging as clog
from cborscope.config import Config, LogConfig


def test_json_log_lines_carry_extras() -> None:
    buf = io.StringIO()
    clog.configure(json=True, level="DEBUG", stream=buf)
    try:
        clog.get_logger("cborscope.test").info("decoded", extra={"size": 3, "raw": b"\x01"})
        line = json.loads(buf.getvalue().strip().splitlines()[-1])
        assert line["msg"] == "decoded"
        assert line["logger"] == "cborscope.test"
        assert line["size"] == 3 and line["raw"] == "01"
    finally:
        clog.configure(level="WARNING", stream=io.StringIO())


def test_text_log_lines() -> None:
    buf = io.StringIO()
    clog.configure(json=False, level="INFO", stream=buf)
    try:
        log = clog.get_logger("cborscope.test")
        log.debug("hidden")
        log.warning("careful", extra={"offset": 7})
        out = buf.getvalue()
        assert "hidden" not in out
        assert "WARNING | cborscope.test offset=7 | careful" in out
    finally:
        clog.configure(level="WARNING", stream=io.StringIO())


def test_configure_from_config_applies_level() -> None:
    clog.configure_from_config(Config(log=LogConfig(level="ERROR", format="json")))
    try:
        logger = clog.get_logger()
        assert logger.level == 40
        assert isinstance(logger.handlers[0].formatter, clog.JSONFormatter)
        assert logger.propagate is False
    finally:
        clog.configure(level="WARNING", stream=io.StringIO())
