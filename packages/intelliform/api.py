"""Path based operations consumed by the CLI, the plugins and the backend.

Every call loads its own :class:`DocumentGraph`; nothing is shared between
calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

from .core.graph import DocumentGraph
from .core.model import FormField, OpenedDocument, PageInfo
from .core.parser import PDFParser
from .core.utils import get_logger
from .core.validator import ensure_pdf_exists
from .core.writer import write_graph
from .forms.acroform import set_need_appearances
from .forms.export import export_fields
from .forms.extract import extract_field_values, extract_fields
from .forms.fields import add_fields, coerce_field
from .forms.geometry import transform_point

PathLike = str | Path
FieldInput = FormField | Mapping[str, Any]

LOGGER = get_logger("intelliform.api")


def _load(path: PathLike) -> DocumentGraph:
    return DocumentGraph.load(ensure_pdf_exists(path))


def open_document(path: PathLike) -> OpenedDocument:
    """Return metadata and page geometry for ``path``."""

    return PDFParser(ensure_pdf_exists(path)).parse()


def get_page_info(path: PathLike, page_index: int) -> PageInfo:
    return PDFParser(ensure_pdf_exists(path)).page_info(page_index)


def get_total_pages(path: PathLike) -> int:
    return PDFParser(ensure_pdf_exists(path)).page_count()


def get_form_fields(path: PathLike) -> list[FormField]:
    """Return the structured field list; the document is not modified."""

    return extract_fields(_load(path))


def get_form_values(path: PathLike) -> dict[str, str]:
    return extract_field_values(_load(path))


def add_form_fields(path: PathLike, fields: Iterable[FieldInput], output_path: PathLike) -> Path:
    """Add ``fields`` to ``path`` and write the result to ``output_path``."""

    prepared = [coerce_field(field) for field in fields]
    graph = _load(path)
    field_ids = add_fields(graph, prepared)
    destination = write_graph(graph, output_path)
    LOGGER.info("Added %d form fields to %s", len(field_ids), destination)
    return destination


def add_form_field(path: PathLike, field: FieldInput) -> Path:
    """Add a single field, rewriting ``path`` in place."""

    return add_form_fields(path, [field], path)


def generate_appearance_streams(path: PathLike, output_path: PathLike) -> Path:
    """Request appearance regeneration; documents without a form are copied as-is."""

    graph = _load(path)
    if not set_need_appearances(graph):
        LOGGER.info("%s has no AcroForm; writing it unchanged", path)
    return write_graph(graph, output_path)


def transform_coordinates(path: PathLike, page_index: int, x: float, y: float) -> tuple[float, float]:
    page = get_page_info(path, page_index)
    return transform_point(page.rotation, x, y, page.width, page.height)


def extract_text(path: PathLike, page_index: int) -> str:
    return PDFParser(ensure_pdf_exists(path)).extract_text(page_index)


def export_form_data(path: PathLike, format: str) -> str:
    """Export the field list of ``path`` as ``json`` or ``csv`` text."""

    return export_fields(get_form_fields(path), format)


__all__ = [
    "open_document",
    "get_page_info",
    "get_total_pages",
    "get_form_fields",
    "get_form_values",
    "add_form_field",
    "add_form_fields",
    "generate_appearance_streams",
    "transform_coordinates",
    "extract_text",
    "export_form_data",
]
