"""Validation helpers shared by IntelliForm tools."""

from __future__ import annotations

from pathlib import Path

from .exceptions import OpenError, PdfIOError
from .utils import resolve_path


def ensure_pdf_exists(path: str | Path) -> Path:
    resolved = resolve_path(path)
    if not resolved.exists():
        raise OpenError(f"PDF file not found: {resolved}")
    if not resolved.is_file():
        raise OpenError(f"Expected a PDF file, got: {resolved}")
    return resolved


def ensure_output_parent(path: str | Path) -> Path:
    resolved = resolve_path(path)
    try:
        resolved.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PdfIOError(f"Unable to create output directory {resolved.parent}: {exc}") from exc
    return resolved
