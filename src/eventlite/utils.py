"""Shared utility helpers for eventlite."""

from __future__ import annotations

import reprlib
from collections.abc import Mapping
from typing import Any


def build_repr(class_name: str, *leading: str, kwargs: Mapping[str, Any] | None = None) -> str:
    """Build a concise repr string: ``ClassName(leading…, k=v, …)``."""
    parts = list(leading)
    if kwargs:
        parts.extend(f"{k}={reprlib.Repr().repr(v)}" for k, v in kwargs.items())
    return f"{class_name}({', '.join(parts)})"


def callable_name(func: Any) -> str:
    """Best-effort human readable name of a callable, used in logs and error messages."""
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if name is None:
        name = type(func).__qualname__
    return name
