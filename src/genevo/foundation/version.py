"""Installed version of the genevo distribution."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata

DISTRIBUTION = "genevo"
UNKNOWN_VERSION = "0.0.0+unknown"


@lru_cache(maxsize=None)
def get_version() -> str:
    """Version recorded in the installed metadata, or ``UNKNOWN_VERSION`` when running from a plain checkout."""
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:  # pragma: no cover - only without an install
        return UNKNOWN_VERSION


__version__ = get_version()

__all__ = ["DISTRIBUTION", "UNKNOWN_VERSION", "__version__", "get_version"]
