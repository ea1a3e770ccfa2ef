"""Serialize a :class:`~intelliform.core.graph.DocumentGraph` back to PDF bytes."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from pypdf.generic import DictionaryObject, NameObject, NumberObject

from .exceptions import PdfIOError
from .graph import DocumentGraph
from .utils import get_logger
from .validator import ensure_output_parent

__all__ = ["serialize", "write_graph"]

LOGGER = get_logger("intelliform.writer")

# Binary marker line recommended after the header so transports keep 8-bit data.
_BINARY_COMMENT = b"%\xe2\xe3\xcf\xd3\n"


def _xref_entry(offset: int, generation: int, kind: bytes) -> bytes:
    return b"%010d %05d %s\r\n" % (offset, generation, kind)


def serialize(graph: DocumentGraph) -> bytes:
    """Return the full document as a classic (table based) PDF byte stream."""

    buffer = BytesIO()
    header = graph.header if graph.header.startswith("%PDF-") else "%PDF-1.7"
    buffer.write(header.encode("latin-1") + b"\n")
    buffer.write(_BINARY_COMMENT)

    offsets: dict[int, tuple[int, int]] = {}
    for oid in graph.ids():
        offsets[oid.number] = (buffer.tell(), oid.generation)
        buffer.write(b"%d %d obj\n" % (oid.number, oid.generation))
        graph.get(oid).write_to_stream(buffer)
        buffer.write(b"\nendobj\n")

    size = max(offsets, default=0) + 1
    xref_offset = buffer.tell()
    buffer.write(b"xref\n0 %d\n" % size)
    buffer.write(_xref_entry(0, 65535, b"f"))
    for number in range(1, size):
        if number in offsets:
            offset, generation = offsets[number]
            buffer.write(_xref_entry(offset, generation, b"n"))
        else:
            buffer.write(_xref_entry(0, 0, b"f"))

    trailer = DictionaryObject()
    trailer[NameObject("/Size")] = NumberObject(size)
    for key in ("/Root", "/Info", "/ID"):
        value = graph.trailer.get(key)
        if value is not None:
            trailer[NameObject(key)] = value
    buffer.write(b"trailer\n")
    trailer.write_to_stream(buffer)
    buffer.write(b"\nstartxref\n%d\n%%%%EOF\n" % xref_offset)

    LOGGER.debug("Serialized %d objects (%d bytes)", len(offsets), buffer.tell())
    return buffer.getvalue()


def write_graph(graph: DocumentGraph, destination: str | Path) -> Path:
    """Write ``graph`` to ``destination``; the write is not atomic."""

    output = ensure_output_parent(destination)
    data = serialize(graph)
    try:
        with output.open("wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise PdfIOError(f"Unable to write PDF to {output}: {exc}") from exc
    LOGGER.debug("Wrote %s", output)
    return output
