"""
cborscope configuration.

The decoder core is pure; these settings only drive the caller layer
(`cborscope.inputs.decode_text` and the CLI), which enforces resource limits
before handing bytes to the engine.

Environment variables (all optional):

  CBORSCOPE_MAX_INPUT=16MiB        # largest accepted buffer (KiB/MiB suffixes ok)
  CBORSCOPE_MAX_DEPTH=200          # max simultaneously open collections
  CBORSCOPE_LOG_LEVEL=WARNING
  CBORSCOPE_LOG_FORMAT=text        # text | json

"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional


# ------------------------------- helpers ------------------------------------


_SIZE_RE = re.compile(
    r"^\s*(?P<num>(?:\d+)(?:\.\d+)?)\s*(?P<unit>bytes?|b|kb|kib|mb|mib|gb|gib)?\s*$",
    re.IGNORECASE,
)

_UNIT_MULT = {
    "b": 1,
    "byte": 1,
    "bytes": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000**2,
    "mib": 1024**2,
    "gb": 1000**3,
    "gib": 1024**3,
}

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LOG_FORMATS = ("text", "json")


def _parse_size(value: Optional[str], *, default: int) -> int:
    """Parse human sizes like '4096', '4KiB', '8MB' → bytes."""
    if not value:
        return default
    m = _SIZE_RE.match(value)
    if not m:
        v = value.strip().lower()
        if v.startswith("0x"):
            return int(v, 16)
        raise ValueError(f"Invalid size: {value!r}")
    num = float(m.group("num"))
    unit = (m.group("unit") or "b").lower()
    return int(num * _UNIT_MULT[unit])


def _getenv(key: str, default: str | None = None) -> str | None:
    v = os.environ.get(key)
    return v if v is not None and v.strip() != "" else default


def _getenv_int(key: str, default: int) -> int:
    v = _getenv(key)
    if v is None:
        return default
    base = 16 if v.strip().lower().startswith("0x") else 10
    try:
        return int(v, base)
    except ValueError as e:
        raise ValueError(f"Invalid int for {key}: {v!r}") from e


# ------------------------------- config -------------------------------------


@dataclass(frozen=True)
class LimitsConfig:
    """
    Caller-side resource limits.

    - max_input_bytes: largest buffer handed to the decoder
    - max_depth: most collections open at once
    """
    max_input_bytes: int = 16 * 1024 * 1024
    max_depth: int = 200

    def validate(self) -> None:
        if self.max_input_bytes <= 0:
            raise ValueError("max_input_bytes must be > 0")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass(frozen=True)
class LogConfig:
    level: str = "WARNING"
    format: str = "text"

    def validate(self) -> None:
        if self.level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        if self.format not in _LOG_FORMATS:
            raise ValueError("log format must be 'text' or 'json'")


@dataclass(frozen=True)
class Config:
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> None:
        self.limits.validate()
        self.log.validate()

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ------------------------------- loader -------------------------------------


def _load_from_env() -> Config:
    limits = LimitsConfig(
        max_input_bytes=_parse_size(_getenv("CBORSCOPE_MAX_INPUT"), default=16 * 1024 * 1024),
        max_depth=_getenv_int("CBORSCOPE_MAX_DEPTH", 200),
    )
    log = LogConfig(
        level=(_getenv("CBORSCOPE_LOG_LEVEL", "WARNING") or "WARNING").upper(),
        format=(_getenv("CBORSCOPE_LOG_FORMAT", "text") or "text").strip().lower(),
    )
    cfg = Config(limits=limits, log=log)
    cfg.validate()
    return cfg


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Load and validate configuration (cached). Clear the cache in tests
    via `get_config.cache_clear()` to observe env changes.
    """
    return _load_from_env()


def format_config(cfg: Config | None = None) -> str:
    cfg = cfg or get_config()
    lines: List[str] = []
    for section, values in cfg.to_dict().items():
        for k, v in values.items():  # type: ignore[union-attr]
            lines.append(f"{section}.{k}: {v}")
    return "\n".join(lines)


__all__ = ["Config", "LimitsConfig", "LogConfig", "get_config", "format_config"]
