from __future__ import annotations

import logging
from pathlib import Path

from pypdf.generic import NameObject, TextStringObject

from intelliform.core.graph import DocumentGraph
from intelliform.core.model import FieldKind
from intelliform.core.writer import write_graph
from intelliform.forms.extract import decode_value, extract_field_values, extract_fields
from intelliform.forms.fields import add_fields


def _reload(graph: DocumentGraph, path: Path) -> DocumentGraph:
    return DocumentGraph.load(write_graph(graph, path))


def test_values_of_foreign_form(form_pdf: Path) -> None:
    values = extract_field_values(DocumentGraph.load(form_pdf))

    assert values == {"full_name": "Ada Lovelace", "city": "London", "notes": ""}


def test_document_without_form_has_no_values(letter_pdf: Path) -> None:
    graph = DocumentGraph.load(letter_pdf)

    assert extract_field_values(graph) == {}
    assert extract_fields(graph) == []


def test_field_list_resolves_pages(form_pdf: Path) -> None:
    fields = extract_fields(DocumentGraph.load(form_pdf))

    by_name = {field.name: field for field in fields}
    assert by_name["full_name"].page == 0
    assert by_name["city"].page == 1
    assert by_name["notes"].value is None
    assert by_name["city"].rect.as_list() == [50, 600, 200, 620]
    assert all(field.kind is FieldKind.TEXT for field in fields)
    assert all(field.id for field in fields)


def test_written_fields_round_trip(letter_pdf: Path, tmp_path: Path) -> None:
    graph = DocumentGraph.load(letter_pdf)
    add_fields(
        graph,
        [
            {"name": "name", "field_type": "text", "rect": [72, 700, 272, 720], "value": "Grace"},
            {"name": "ok", "field_type": "checkbox", "rect": [72, 650, 84, 662], "value": "true", "page": 1},
            {
                "name": "size",
                "field_type": "dropdown",
                "rect": [72, 600, 172, 620],
                "value": "M",
                "properties": {"options": "S, M, L"},
            },
        ],
    )
    reloaded = _reload(graph, tmp_path / "filled.pdf")

    assert extract_field_values(reloaded) == {"name": "Grace", "ok": "Yes", "size": "M"}

    fields = {field.name: field for field in extract_fields(reloaded)}
    assert fields["ok"].kind is FieldKind.CHECKBOX
    assert fields["ok"].page == 1
    assert fields["size"].properties == {"options": "S, M, L"}
    assert fields["name"].rect.as_list() == [72, 700, 272, 720]


def test_duplicate_names_keep_last_value(letter_pdf: Path, tmp_path: Path, caplog) -> None:
    graph = DocumentGraph.load(letter_pdf)
    add_fields(
        graph,
        [
            {"name": "dup", "field_type": "text", "rect": [0, 0, 10, 10], "value": "first"},
            {"name": "dup", "field_type": "text", "rect": [0, 20, 10, 30], "value": "second"},
        ],
    )

    logger = logging.getLogger("intelliform.forms.extract")
    logger.addHandler(caplog.handler)
    try:
        values = extract_field_values(_reload(graph, tmp_path / "dup.pdf"))
    finally:
        logger.removeHandler(caplog.handler)

    assert values == {"dup": "second"}
    assert any("Duplicate field name" in record.getMessage() for record in caplog.records)


def test_decode_value_variants(letter_pdf: Path) -> None:
    graph = DocumentGraph.load(letter_pdf)

    assert decode_value(graph, NameObject("/Off")) == "Off"
    assert decode_value(graph, TextStringObject("plain")) == "plain"
    assert decode_value(graph, None) == ""
    assert decode_value(graph, graph.reference(graph.add(TextStringObject("indirect")))) == "indirect"


def test_parent_field_takes_placement_from_its_widget(hierarchical_form_pdf: Path) -> None:
    graph = DocumentGraph.load(hierarchical_form_pdf)

    fields = {field.name: field for field in extract_fields(graph)}

    parent = fields["parent_name"]
    assert parent.kind is FieldKind.TEXT
    assert parent.value == "hello"
    assert parent.rect.as_list() == [40, 300, 240, 320]
    assert parent.page == 1
    assert extract_field_values(graph)["parent_name"] == "hello"


def test_field_type_is_inherited_from_parent(hierarchical_form_pdf: Path) -> None:
    fields = {field.name: field for field in extract_fields(DocumentGraph.load(hierarchical_form_pdf))}

    street = fields["street"]
    assert street.kind is FieldKind.TEXT
    assert street.value == "Main St"
    assert street.page == 1
