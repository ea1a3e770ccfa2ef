from __future__ import annotations

import json
from pathlib import Path

import pytest
from pypdf import PdfReader

import intelliform
from intelliform import (
    FieldDefinitionError,
    InvalidPageError,
    OpenError,
    UnsupportedOperationError,
    add_form_field,
    add_form_fields,
    export_form_data,
    extract_text,
    generate_appearance_streams,
    get_form_fields,
    get_form_values,
    get_page_info,
    get_total_pages,
    open_document,
    transform_coordinates,
)

FIELDS = [
    {"name": "first_name", "field_type": "text", "x": 72, "y": 700, "width": 200, "height": 20},
    {"name": "subscribe", "field_type": "checkbox", "x": 72, "y": 650, "width": 12, "height": 12, "value": "true"},
    {"name": "signature", "field_type": "signature", "x": 72, "y": 100, "width": 200, "height": 40, "page": 1},
]


def test_open_document_summary(sample_pdf: Path) -> None:
    document = open_document(sample_pdf)

    assert document.page_count == 5
    assert get_total_pages(sample_pdf) == 5
    payload = document.as_dict()
    assert payload["metadata"]["title"] == "Sample"
    assert payload["pages"][0] == {"index": 0, "width": 200.0, "height": 200.0, "rotation": 0}


def test_open_missing_document(tmp_path: Path) -> None:
    with pytest.raises(OpenError):
        open_document(tmp_path / "nope.pdf")


def test_page_info_and_coordinates(rotated_pdf: Path) -> None:
    assert get_page_info(rotated_pdf, 0).rotation == 90
    assert transform_coordinates(rotated_pdf, 0, 100, 200) == (200, 512)
    with pytest.raises(InvalidPageError):
        get_page_info(rotated_pdf, 1)


def test_add_form_fields_writes_new_file(letter_pdf: Path, tmp_path: Path) -> None:
    original = letter_pdf.read_bytes()
    output = tmp_path / "out" / "form.pdf"

    result = add_form_fields(letter_pdf, FIELDS, output)

    assert result == output.resolve()
    assert letter_pdf.read_bytes() == original
    reader = PdfReader(str(output))
    assert len(reader.pages) == 2
    assert set(reader.get_fields() or {}) == {"first_name", "subscribe", "signature"}
    assert get_form_values(output)["subscribe"] == "Yes"
    assert [field.page for field in get_form_fields(output)] == [0, 0, 1]


def test_add_form_field_rewrites_in_place(letter_pdf: Path) -> None:
    add_form_field(letter_pdf, FIELDS[0])
    add_form_field(letter_pdf, {"name": "second", "field_type": "text", "rect": [72, 600, 272, 620]})

    assert list(get_form_values(letter_pdf)) == ["first_name", "second"]


def test_add_form_fields_rejects_bad_payload_before_writing(letter_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "never.pdf"

    with pytest.raises(UnsupportedOperationError):
        add_form_fields(letter_pdf, [FIELDS[0], {**FIELDS[0], "field_type": "radio"}], output)
    with pytest.raises(FieldDefinitionError):
        add_form_fields(letter_pdf, [{"name": "x", "field_type": "text"}], output)
    with pytest.raises(InvalidPageError):
        add_form_fields(letter_pdf, [{**FIELDS[0], "page": 3}], output)

    assert not output.exists()


def test_generate_appearance_streams_without_form(letter_pdf: Path, tmp_path: Path) -> None:
    output = generate_appearance_streams(letter_pdf, tmp_path / "copy.pdf")

    reader = PdfReader(str(output))
    assert len(reader.pages) == 2
    assert "/AcroForm" not in reader.trailer["/Root"]


def test_generate_appearance_streams_sets_flag(form_pdf: Path, tmp_path: Path) -> None:
    output = generate_appearance_streams(form_pdf, tmp_path / "flagged.pdf")

    form = PdfReader(str(output)).trailer["/Root"]["/AcroForm"]
    assert form["/NeedAppearances"].value is True


def test_export_form_data(form_pdf: Path) -> None:
    records = json.loads(export_form_data(form_pdf, "json"))
    assert [record["name"] for record in records] == ["full_name", "city", "notes"]

    csv_text = export_form_data(form_pdf, "csv")
    assert csv_text.splitlines()[0] == "name,type,value,x,y,width,height,page"

    with pytest.raises(UnsupportedOperationError):
        export_form_data(form_pdf, "yaml")


def test_extract_text_checks_page_bounds(sample_pdf: Path) -> None:
    assert extract_text(sample_pdf, 4) == ""
    with pytest.raises(InvalidPageError):
        extract_text(sample_pdf, 5)


def test_package_exports_registry() -> None:
    assert {"open", "page_info", "fields", "add_fields", "appearances", "export"} <= set(
        intelliform.registry.names()
    )
