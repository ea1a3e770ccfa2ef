"""Form root (``/AcroForm``) synthesis."""

from __future__ import annotations

from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NumberObject,
)

from ..core.exceptions import MalformedStructureError
from ..core.graph import DocumentGraph, ObjectId
from ..core.utils import get_logger

__all__ = [
    "TEXT_FONT_NAME",
    "SYMBOL_FONT_NAME",
    "find_form_root",
    "ensure_form_root",
    "form_fields_array",
    "set_need_appearances",
]

LOGGER = get_logger("intelliform.forms.acroform")

TEXT_FONT_NAME = "/Helv"
SYMBOL_FONT_NAME = "/ZaDb"


def _standard_font(base_font: str, *, encoding: str | None = None) -> DictionaryObject:
    font = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject(base_font),
        }
    )
    if encoding is not None:
        font[NameObject("/Encoding")] = NameObject(encoding)
    return font


def find_form_root(graph: DocumentGraph) -> ObjectId | None:
    """Return the id of the indirect ``/AcroForm`` dictionary, if there is one."""

    entry = graph.root.get("/AcroForm")
    if isinstance(entry, IndirectObject):
        return ObjectId.of(entry)
    return None


def ensure_form_root(graph: DocumentGraph) -> ObjectId:
    """Return the form root id, creating the form and its fonts on first use."""

    root = graph.root
    entry = root.get("/AcroForm")
    if isinstance(entry, IndirectObject):
        graph.get_dictionary(entry)
        return ObjectId.of(entry)

    if isinstance(entry, DictionaryObject):
        # A direct form dictionary is promoted so fields can reference it by id.
        form_id = graph.add(entry)
        graph.set_item(graph.root, "/AcroForm", graph.reference(form_id))
        LOGGER.debug("Promoted direct AcroForm to %s", form_id)
        return form_id

    if entry is not None:
        raise MalformedStructureError("Catalog /AcroForm is not a dictionary")

    helvetica_id = graph.add(_standard_font("/Helvetica", encoding="/WinAnsiEncoding"))
    zapf_id = graph.add(_standard_font("/ZapfDingbats"))

    fonts = DictionaryObject(
        {
            NameObject(TEXT_FONT_NAME): graph.reference(helvetica_id),
            NameObject(SYMBOL_FONT_NAME): graph.reference(zapf_id),
        }
    )
    form = DictionaryObject(
        {
            NameObject("/Fields"): ArrayObject(),
            NameObject("/NeedAppearances"): BooleanObject(True),
            NameObject("/SigFlags"): NumberObject(0),
            NameObject("/DR"): DictionaryObject({NameObject("/Font"): fonts}),
        }
    )
    form_id = graph.add(form)

    # Re-acquire the catalog by id for the write.
    graph.set_item(graph.root, "/AcroForm", graph.reference(form_id))
    LOGGER.debug("Created AcroForm %s with fonts %s, %s", form_id, helvetica_id, zapf_id)
    return form_id


def form_fields_array(graph: DocumentGraph, form_id: ObjectId) -> ArrayObject:
    """Return the form's ``/Fields`` array, creating an empty one when absent."""

    form = graph.get_dictionary(form_id)
    fields = form.get("/Fields")
    if fields is None:
        fields = ArrayObject()
        graph.set_item(form, "/Fields", fields)
        return fields
    fields = graph.resolve_deep(fields)
    if not isinstance(fields, ArrayObject):
        raise MalformedStructureError("AcroForm /Fields is not an array")
    return fields


def set_need_appearances(graph: DocumentGraph) -> bool:
    """Flag the form for appearance regeneration; ``False`` when there is no form."""

    entry = graph.root.get("/AcroForm")
    if entry is None:
        LOGGER.debug("Document has no AcroForm; nothing to flag")
        return False
    form = graph.resolve_deep(entry)
    if not isinstance(form, DictionaryObject):
        raise MalformedStructureError("Catalog /AcroForm is not a dictionary")
    graph.set_item(form, "/NeedAppearances", BooleanObject(True))
    return True
