"""Namespace for pluggable IntelliForm tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .inspector import inspect  # noqa: F401  # register open, page_info, fields and export
    from .forms import edit  # noqa: F401  # register add_fields and appearances


__all__ = ["registry", "load_builtin_plugins"]
