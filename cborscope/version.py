"""
cborscope version.

__version__ is the base semantic version, overridable via CBORSCOPE_VERSION.
"""

from __future__ import annotations

import os

# Bump this when making a release.
_BASE_SEMVER = "0.2.0"

__version__ = os.environ.get("CBORSCOPE_VERSION") or _BASE_SEMVER

__all__ = ["__version__"]
