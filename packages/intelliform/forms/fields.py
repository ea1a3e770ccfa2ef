"""Build widget field dictionaries and thread them into the document."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from ..core.exceptions import MalformedStructureError, UnsupportedOperationError
from ..core.graph import DocumentGraph, ObjectId
from ..core.model import FieldKind, FormField
from ..core.parser import extract_page_info
from ..core.utils import get_logger
from .acroform import SYMBOL_FONT_NAME, TEXT_FONT_NAME, ensure_form_root, form_fields_array
from .appearance import checkbox_appearance
from .geometry import transform_rect

__all__ = [
    "FLAG_MULTILINE",
    "FLAG_RADIO",
    "FLAG_COMBO",
    "CHECKED_STATE",
    "UNCHECKED_STATE",
    "coerce_field",
    "build_field_dictionary",
    "add_field",
    "add_fields",
]

LOGGER = get_logger("intelliform.forms.fields")

FLAG_MULTILINE = 1 << 12
FLAG_RADIO = 1 << 15
FLAG_COMBO = 1 << 17

ANNOTATION_PRINT = 4

CHECKED_STATE = "/Yes"
UNCHECKED_STATE = "/Off"

DEFAULT_APPEARANCE = f"{TEXT_FONT_NAME} 0 Tf 0 g"

FieldBuilder = Callable[[DocumentGraph, FormField, DictionaryObject], None]


def _set(target: DictionaryObject, key: str, value: Any) -> None:
    target[NameObject(key)] = value


def _build_text(graph: DocumentGraph, field: FormField, dictionary: DictionaryObject) -> None:
    _set(dictionary, "/FT", NameObject("/Tx"))
    _set(dictionary, "/DA", TextStringObject(DEFAULT_APPEARANCE))
    if field.value is not None:
        _set(dictionary, "/V", TextStringObject(field.value))

    max_length = field.properties.get("maxLength")
    if max_length is not None:
        try:
            _set(dictionary, "/MaxLen", NumberObject(int(str(max_length).strip())))
        except ValueError:
            LOGGER.debug("Ignoring non-numeric maxLength %r on %s", max_length, field.name)

    if field.properties.get("multiline") == "true":
        _set(dictionary, "/Ff", NumberObject(FLAG_MULTILINE))


def _build_checkbox(graph: DocumentGraph, field: FormField, dictionary: DictionaryObject) -> None:
    _set(dictionary, "/FT", NameObject("/Btn"))
    _set(dictionary, "/Ff", NumberObject(FLAG_RADIO))

    checked_id = graph.add(checkbox_appearance(True))
    unchecked_id = graph.add(checkbox_appearance(False))
    normal = DictionaryObject(
        {
            NameObject(CHECKED_STATE): graph.reference(checked_id),
            NameObject(UNCHECKED_STATE): graph.reference(unchecked_id),
        }
    )
    _set(dictionary, "/AP", DictionaryObject({NameObject("/N"): normal}))
    _set(dictionary, "/MK", DictionaryObject({NameObject("/CA"): TextStringObject("4")}))
    _set(dictionary, "/DA", TextStringObject(f"{SYMBOL_FONT_NAME} 0 Tf 0 g"))

    state = CHECKED_STATE if field.value == "true" else UNCHECKED_STATE
    _set(dictionary, "/V", NameObject(state))
    _set(dictionary, "/AS", NameObject(state))


def _build_dropdown(graph: DocumentGraph, field: FormField, dictionary: DictionaryObject) -> None:
    _set(dictionary, "/FT", NameObject("/Ch"))
    _set(dictionary, "/Ff", NumberObject(FLAG_COMBO))
    _set(dictionary, "/DA", TextStringObject(DEFAULT_APPEARANCE))

    options = field.properties.get("options")
    if options is not None:
        tokens = [token.strip() for token in options.split(",")] if options else []
        _set(dictionary, "/Opt", ArrayObject(TextStringObject(token) for token in tokens))

    if field.value is not None:
        _set(dictionary, "/V", TextStringObject(field.value))


def _build_signature(graph: DocumentGraph, field: FormField, dictionary: DictionaryObject) -> None:
    _set(dictionary, "/FT", NameObject("/Sig"))
    # Placeholder only: no /Contents or /ByteRange are produced.
    signature = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Sig"),
            NameObject("/Filter"): NameObject("/Adobe.PPKLite"),
            NameObject("/SubFilter"): NameObject("/adbe.pkcs7.detached"),
        }
    )
    _set(dictionary, "/V", signature)


_BUILDERS: dict[FieldKind, FieldBuilder] = {
    FieldKind.TEXT: _build_text,
    FieldKind.CHECKBOX: _build_checkbox,
    FieldKind.DROPDOWN: _build_dropdown,
    FieldKind.SIGNATURE: _build_signature,
}


def coerce_field(field: FormField | Mapping[str, Any]) -> FormField:
    if isinstance(field, FormField):
        return field
    return FormField.from_dict(field)


def build_field_dictionary(
    graph: DocumentGraph,
    field: FormField,
    *,
    rect: list[float],
    page_ref: IndirectObject,
) -> DictionaryObject:
    """Return the widget dictionary for ``field``; appearance streams are registered."""

    builder = _BUILDERS.get(field.kind)
    if builder is None:
        raise UnsupportedOperationError(f"Unsupported field type: {field.kind}")

    dictionary = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Widget"),
            NameObject("/T"): TextStringObject(field.name),
            NameObject("/F"): NumberObject(ANNOTATION_PRINT),
        }
    )
    builder(graph, field, dictionary)
    _set(dictionary, "/Rect", ArrayObject(FloatObject(value) for value in rect))
    _set(dictionary, "/P", page_ref)
    return dictionary


def _page_annotations(graph: DocumentGraph, page: DictionaryObject) -> ArrayObject | None:
    annots = page.get("/Annots")
    if annots is None:
        return None
    annots = graph.resolve_deep(annots)
    if not isinstance(annots, ArrayObject):
        raise MalformedStructureError("Page /Annots is not an array")
    return annots


def add_field(
    graph: DocumentGraph,
    form_id: ObjectId,
    field: FormField | Mapping[str, Any],
) -> ObjectId:
    """Register one field and link it from the form and its page.

    Either the whole field lands in the graph or nothing does.
    """

    field = coerce_field(field)
    if field.kind not in _BUILDERS:
        raise UnsupportedOperationError(f"Unsupported field type: {field.kind}")

    with graph.transaction():
        page_id = graph.page_id(field.page)
        page_info = extract_page_info(graph, page_id, field.page)
        rect = transform_rect(page_info, field.rect)

        fields_array = form_fields_array(graph, form_id)
        page = graph.get_dictionary(page_id)
        annots = _page_annotations(graph, page)

        dictionary = build_field_dictionary(
            graph, field, rect=rect.as_list(), page_ref=graph.reference(page_id)
        )
        field_id = graph.add(dictionary)
        field_ref = graph.reference(field_id)

        graph.append(fields_array, field_ref)
        if annots is None:
            graph.set_item(page, "/Annots", ArrayObject([field_ref]))
        else:
            graph.append(annots, field_ref)

    LOGGER.debug(
        "Added %s field %r as %s on page %d at %s",
        field.kind.value,
        field.name,
        field_id,
        field.page,
        rect.as_list(),
    )
    return field_id


def add_fields(
    graph: DocumentGraph,
    fields: Iterable[FormField | Mapping[str, Any]],
) -> list[ObjectId]:
    """Ensure the form root, then add each field atomically."""

    prepared = [coerce_field(field) for field in fields]
    form_id = ensure_form_root(graph)
    return [add_field(graph, form_id, field) for field in prepared]
