"""Page geometry and document metadata extraction.

This module provides a thin facade around :class:`DocumentGraph` that exposes
the normalized page and metadata views consumed by the form tools.  Page
attributes follow the inheritance rules of the PDF page tree: ``/MediaBox``
and ``/Rotate`` may live on any ancestor ``/Pages`` node.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from pypdf import PdfReader
from pypdf.errors import PyPdfError
from pypdf.generic import ArrayObject, DictionaryObject, NameObject

from .exceptions import InvalidPageError, MalformedStructureError, OpenError
from .graph import DocumentGraph, ObjectId
from .model import DocumentMetadata, OpenedDocument, PageInfo
from .utils import get_logger, resolve_path

__all__ = [
    "PDFParser",
    "extract_page_info",
    "extract_metadata",
    "normalize_rotation",
    "decode_text",
]

LOGGER = get_logger("intelliform.parser")

_METADATA_KEYS = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
    "creator": "/Creator",
    "producer": "/Producer",
    "creation_date": "/CreationDate",
    "modification_date": "/ModDate",
}


# -- Utility helpers ---------------------------------------------------------


def decode_text(value: Any) -> str | None:
    """Return the text of a PDF string object, or ``None`` for anything else."""

    if isinstance(value, NameObject):
        return None
    if isinstance(value, str):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return None


def normalize_rotation(value: Any, *, strict: bool = False) -> int:
    """Fold ``/Rotate`` into {0, 90, 180, 270}."""

    if value is None:
        return 0
    try:
        degrees = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedStructureError(f"Invalid Rotate value: {value!r}") from exc
    if strict and degrees % 90:
        raise MalformedStructureError(f"Rotate must be a multiple of 90, got {value!r}")
    return (int(round(degrees / 90.0)) * 90) % 360


def _inherited(graph: DocumentGraph, page: DictionaryObject, key: str) -> Any:
    visited: set[int] = set()
    current: DictionaryObject | None = page
    while current is not None:
        if id(current) in visited:
            break
        visited.add(id(current))
        candidate = current.get(key)
        if candidate is not None:
            return graph.resolve_deep(candidate)
        parent = current.get("/Parent")
        parent_resolved = graph.resolve_deep(parent) if parent is not None else None
        current = parent_resolved if isinstance(parent_resolved, DictionaryObject) else None
    return None


def _media_box(graph: DocumentGraph, page: DictionaryObject) -> tuple[float, float, float, float]:
    box = _inherited(graph, page, "/MediaBox")
    if box is None:
        raise MalformedStructureError("Missing MediaBox")
    if not isinstance(box, (ArrayObject, list)) or len(box) != 4:
        raise MalformedStructureError("Invalid MediaBox format")
    try:
        x1, y1, x2, y2 = (float(graph.resolve_deep(item)) for item in box)
    except (TypeError, ValueError) as exc:
        raise MalformedStructureError("MediaBox entries must be numeric") from exc
    return x1, y1, x2, y2


def extract_page_info(
    graph: DocumentGraph,
    page_id: ObjectId,
    index: int,
    *,
    strict: bool | None = None,
) -> PageInfo:
    page = graph.get_dictionary(page_id)
    x1, y1, x2, y2 = _media_box(graph, page)
    if strict is None:
        strict = graph.settings.strict_rotation
    rotation = normalize_rotation(_inherited(graph, page, "/Rotate"), strict=strict)
    return PageInfo(index=index, width=x2 - x1, height=y2 - y1, rotation=rotation)


def extract_metadata(graph: DocumentGraph) -> DocumentMetadata:
    info = graph.info
    if info is None:
        return DocumentMetadata()
    values: dict[str, str | None] = {}
    for attribute, key in _METADATA_KEYS.items():
        raw = info.get(key)
        values[attribute] = decode_text(graph.resolve_deep(raw)) if raw is not None else None
    return DocumentMetadata(**values)


# -- Facade ------------------------------------------------------------------


class PDFParser:
    """Structured read access to a single PDF for IntelliForm tools."""

    def __init__(self, source: str | Path, *, preload: bool = False) -> None:
        self.source = resolve_path(source)
        self._graph: DocumentGraph | None = None
        self._page_ids: list[ObjectId] | None = None
        if preload:
            self.load()

    @property
    def graph(self) -> DocumentGraph:
        return self.load()

    def load(self) -> DocumentGraph:
        if self._graph is None:
            self._graph = DocumentGraph.load(self.source)
        return self._graph

    def page_ids(self) -> Sequence[ObjectId]:
        if self._page_ids is None:
            self._page_ids = self.graph.pages()
        return self._page_ids

    def page_count(self) -> int:
        return len(self.page_ids())

    def page_info(self, index: int) -> PageInfo:
        page_ids = self.page_ids()
        if index < 0 or index >= len(page_ids):
            raise InvalidPageError(index, len(page_ids))
        return extract_page_info(self.graph, page_ids[index], index)

    def pages(self) -> list[PageInfo]:
        return [extract_page_info(self.graph, oid, i) for i, oid in enumerate(self.page_ids())]

    def metadata(self) -> DocumentMetadata:
        return extract_metadata(self.graph)

    def parse(self) -> OpenedDocument:
        """Parse the PDF file and return an :class:`OpenedDocument` summary."""

        pages = self.pages()
        document = OpenedDocument(
            path=self.source,
            page_count=len(pages),
            pages=pages,
            metadata=self.metadata(),
        )
        LOGGER.debug("Parsed %s: %d pages", self.source, document.page_count)
        return document

    def extract_text(self, index: int) -> str:
        """Return the text layer of one page using pypdf's extractor."""

        page_count = self.page_count()
        if index < 0 or index >= page_count:
            raise InvalidPageError(index, page_count)
        try:
            reader = PdfReader(str(self.source))
            return reader.pages[index].extract_text() or ""
        except PyPdfError as exc:
            raise OpenError(f"Unable to extract text from page {index}: {exc}") from exc
