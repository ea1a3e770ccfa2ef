"""Recover field names and values from an existing form."""

from __future__ import annotations

from typing import Any

from pypdf.generic import ArrayObject, DictionaryObject, IndirectObject, NameObject

from ..core.exceptions import FieldDefinitionError, MalformedStructureError
from ..core.graph import DocumentGraph, ObjectId
from ..core.model import FieldKind, FormField, Rect
from ..core.parser import decode_text
from ..core.utils import get_logger
from .fields import FLAG_MULTILINE

__all__ = ["iter_field_dictionaries", "decode_value", "extract_field_values", "extract_fields"]

LOGGER = get_logger("intelliform.forms.extract")

_KIND_BY_TYPE = {
    "/Tx": FieldKind.TEXT,
    "/Btn": FieldKind.CHECKBOX,
    "/Ch": FieldKind.DROPDOWN,
    "/Sig": FieldKind.SIGNATURE,
}


def iter_field_dictionaries(graph: DocumentGraph) -> list[tuple[ObjectId | None, DictionaryObject]]:
    """Return ``(id, dictionary)`` for each entry of the form's ``/Fields``."""

    entry = graph.root.get("/AcroForm")
    if entry is None:
        return []
    form = graph.resolve_deep(entry)
    if not isinstance(form, DictionaryObject):
        raise MalformedStructureError("Catalog /AcroForm is not a dictionary")
    fields = form.get("/Fields")
    if fields is None:
        return []
    fields = graph.resolve_deep(fields)
    if not isinstance(fields, ArrayObject):
        raise MalformedStructureError("AcroForm /Fields is not an array")

    results: list[tuple[ObjectId | None, DictionaryObject]] = []
    for item in fields:
        field_id = ObjectId.of(item) if isinstance(item, IndirectObject) else None
        dictionary = graph.resolve_deep(item)
        if isinstance(dictionary, DictionaryObject):
            results.append((field_id, dictionary))
    return results


def decode_value(graph: DocumentGraph, raw: Any) -> str:
    value = graph.resolve_deep(raw) if raw is not None else None
    if isinstance(value, NameObject):
        return str(value)[1:]
    text = decode_text(value)
    return text if text is not None else ""


def extract_field_values(graph: DocumentGraph) -> dict[str, str]:
    """Return a ``name -> value`` mapping; later duplicates overwrite earlier ones."""

    values: dict[str, str] = {}
    for _, dictionary in iter_field_dictionaries(graph):
        name = decode_text(graph.resolve_deep(dictionary.get("/T")))
        if name is None:
            continue
        if name in values:
            LOGGER.warning("Duplicate field name %r; keeping the last value", name)
        values[name] = decode_value(graph, dictionary.get("/V"))
    return values


def _page_lookup(graph: DocumentGraph) -> tuple[dict[ObjectId, int], dict[ObjectId, int]]:
    by_page: dict[ObjectId, int] = {}
    by_annotation: dict[ObjectId, int] = {}
    for index, page_id in enumerate(graph.pages()):
        by_page[page_id] = index
        annots = graph.get_dictionary(page_id).get("/Annots")
        annots = graph.resolve_deep(annots) if annots is not None else None
        if isinstance(annots, ArrayObject):
            for annot in annots:
                if isinstance(annot, IndirectObject):
                    by_annotation.setdefault(ObjectId.of(annot), index)
    return by_page, by_annotation


def _properties(graph: DocumentGraph, kind: FieldKind, dictionary: DictionaryObject) -> dict[str, str]:
    properties: dict[str, str] = {}
    max_length = graph.resolve_deep(dictionary.get("/MaxLen"))
    if isinstance(max_length, int):
        properties["maxLength"] = str(int(max_length))
    flags = graph.resolve_deep(dictionary.get("/Ff"))
    if kind is FieldKind.TEXT and isinstance(flags, int) and int(flags) & FLAG_MULTILINE:
        properties["multiline"] = "true"
    options = graph.resolve_deep(dictionary.get("/Opt"))
    if isinstance(options, ArrayObject):
        labels = []
        for option in options:
            option = graph.resolve_deep(option)
            # Export/display pairs keep the display label.
            if isinstance(option, ArrayObject) and option:
                option = graph.resolve_deep(option[-1])
            label = decode_text(option)
            if label is not None:
                labels.append(label)
        properties["options"] = ", ".join(labels)
    return properties


def _field_type(graph: DocumentGraph, dictionary: DictionaryObject) -> Any:
    """Return ``/FT``, following ``/Parent`` for fields that inherit it."""

    visited: set[int] = set()
    current: Any = dictionary
    while isinstance(current, DictionaryObject) and id(current) not in visited:
        visited.add(id(current))
        field_type = current.get("/FT")
        if field_type is not None:
            return graph.resolve_deep(field_type)
        parent = current.get("/Parent")
        current = graph.resolve_deep(parent) if parent is not None else None
    return None


def _widget(
    graph: DocumentGraph,
    field_id: ObjectId | None,
    dictionary: DictionaryObject,
) -> tuple[ObjectId | None, DictionaryObject] | None:
    """Return the annotation carrying the field's placement.

    Merged field/widget dictionaries carry ``/Rect`` themselves; otherwise the
    first ``/Kids`` entry is the widget.
    """

    if dictionary.get("/Rect") is not None:
        return field_id, dictionary
    kids = dictionary.get("/Kids")
    kids = graph.resolve_deep(kids) if kids is not None else None
    if not isinstance(kids, ArrayObject) or not kids:
        return None
    first = kids[0]
    kid = graph.resolve_deep(first)
    if not isinstance(kid, DictionaryObject) or kid.get("/Rect") is None:
        return None
    return (ObjectId.of(first) if isinstance(first, IndirectObject) else None), kid


def extract_fields(graph: DocumentGraph) -> list[FormField]:
    """Return the structured list view of the document's fields."""

    by_page, by_annotation = _page_lookup(graph)
    results: list[FormField] = []
    for field_id, dictionary in iter_field_dictionaries(graph):
        name = decode_text(graph.resolve_deep(dictionary.get("/T")))
        field_type = _field_type(graph, dictionary)
        kind = _KIND_BY_TYPE.get(field_type) if isinstance(field_type, NameObject) else None
        widget = _widget(graph, field_id, dictionary)
        if not name or kind is None or widget is None:
            LOGGER.debug("Skipping field %s without name, known type or rect", field_id)
            continue
        widget_id, widget_dictionary = widget
        raw_rect = graph.resolve_deep(widget_dictionary.get("/Rect"))
        if not isinstance(raw_rect, ArrayObject):
            LOGGER.debug("Skipping field %r with a non-array rect", name)
            continue
        try:
            rect = Rect.from_sequence(graph.resolve_deep(item) for item in raw_rect)
        except FieldDefinitionError:
            LOGGER.debug("Skipping field %r with malformed rect", name)
            continue

        page_ref = widget_dictionary.get("/P")
        if isinstance(page_ref, IndirectObject) and ObjectId.of(page_ref) in by_page:
            page = by_page[ObjectId.of(page_ref)]
        elif widget_id is not None and widget_id in by_annotation:
            page = by_annotation[widget_id]
        else:
            page = 0

        raw_value = dictionary.get("/V")
        results.append(
            FormField(
                name=name,
                kind=kind,
                rect=rect,
                page=page,
                value=decode_value(graph, raw_value) if raw_value is not None else None,
                properties=_properties(graph, kind, dictionary),
                id=str(field_id) if field_id is not None else None,
            )
        )
    return results
