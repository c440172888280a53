from __future__ import annotations

import pytest

from cborscope.config import get_config


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Isolate tests from the caller's CBORSCOPE_* environment."""
    for key in ("CBORSCOPE_MAX_INPUT", "CBORSCOPE_MAX_DEPTH", "CBORSCOPE_LOG_LEVEL", "CBORSCOPE_LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()
