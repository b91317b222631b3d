"""
Error types raised by genevo.

Import from here in user code; the classes live in ``genevo.foundation.exceptions``
and are looked up on first access.
"""

from __future__ import annotations

from importlib import import_module

_SOURCE = "genevo.foundation.exceptions"

__all__ = list(import_module(_SOURCE).__all__)


def __getattr__(name: str):
    if name not in __all__:
        raise AttributeError(f"genevo.exceptions has no error type {name!r}")
    error_type = getattr(import_module(_SOURCE), name)
    globals()[name] = error_type
    return error_type


def __dir__() -> list[str]:
    return sorted(__all__)
