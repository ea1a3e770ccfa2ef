from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    TextStringObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for entry in (PROJECT_ROOT, PROJECT_ROOT / "packages"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


def _write(writer: PdfWriter, path: Path) -> Path:
    with path.open("wb") as stream:
        writer.write(stream)
    return path


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "intelliform-tests", "/Title": "Sample"})
    return _write(writer, tmp_path / "sample.pdf")


@pytest.fixture()
def letter_pdf(tmp_path: Path) -> Path:
    writer = PdfWriter()
    for _ in range(2):
        writer.add_blank_page(width=612, height=792)
    return _write(writer, tmp_path / "letter.pdf")


@pytest.fixture()
def rotated_pdf(tmp_path: Path) -> Path:
    writer = PdfWriter()
    page = writer.add_blank_page(width=612, height=792)
    page.rotate(90)
    return _write(writer, tmp_path / "rotated.pdf")


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    """Build single page PDFs with arbitrary raw page entries."""

    def _create(filename: str, **entries) -> Path:
        writer = PdfWriter()
        page = writer.add_blank_page(width=612, height=792)
        for key, value in entries.items():
            if value is None:
                page.pop(NameObject(f"/{key}"), None)
            else:
                page[NameObject(f"/{key}")] = value
        return _write(writer, tmp_path / filename)

    return _create


def _text_widget(writer: PdfWriter, page, name: str, value: str | None, rect: list[float]):
    widget = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Annot"),
            NameObject("/Subtype"): NameObject("/Widget"),
            NameObject("/FT"): NameObject("/Tx"),
            NameObject("/T"): TextStringObject(name),
            NameObject("/Rect"): ArrayObject(FloatObject(item) for item in rect),
            NameObject("/P"): page.indirect_reference,
        }
    )
    if value is not None:
        widget[NameObject("/V")] = TextStringObject(value)
    return writer._add_object(widget)


@pytest.fixture()
def form_pdf(tmp_path: Path) -> Path:
    """A two page document whose form was authored by another producer."""

    writer = PdfWriter()
    first = writer.add_blank_page(width=612, height=792)
    second = writer.add_blank_page(width=612, height=792)

    name_ref = _text_widget(writer, first, "full_name", "Ada Lovelace", [50, 700, 250, 720])
    city_ref = _text_widget(writer, second, "city", "London", [50, 600, 200, 620])
    empty_ref = _text_widget(writer, second, "notes", None, [50, 500, 300, 560])

    first[NameObject("/Annots")] = ArrayObject([name_ref])
    second[NameObject("/Annots")] = ArrayObject([city_ref, empty_ref])

    form = DictionaryObject(
        {
            NameObject("/Fields"): ArrayObject([name_ref, city_ref, empty_ref]),
            NameObject("/NeedAppearances"): BooleanObject(False),
        }
    )
    writer._root_object[NameObject("/AcroForm")] = writer._add_object(form)
    return _write(writer, tmp_path / "form.pdf")


@pytest.fixture()
def encrypted_pdf(tmp_path: Path) -> Path:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.encrypt("secret")
    return _write(writer, tmp_path / "encrypted.pdf")


@pytest.fixture()
def hierarchical_form_pdf(tmp_path: Path) -> Path:
    """Fields whose placement or type lives on a related dictionary."""

    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    second = writer.add_blank_page(width=612, height=792)

    # A parent holding /T, /FT and /V with a single widget kid on page 1.
    parent_ref = writer._add_object(
        DictionaryObject(
            {
                NameObject("/FT"): NameObject("/Tx"),
                NameObject("/T"): TextStringObject("parent_name"),
                NameObject("/V"): TextStringObject("hello"),
            }
        )
    )
    kid_ref = writer._add_object(
        DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/Rect"): ArrayObject(FloatObject(item) for item in [40, 300, 240, 320]),
                NameObject("/Parent"): parent_ref,
            }
        )
    )
    parent_ref.get_object()[NameObject("/Kids")] = ArrayObject([kid_ref])

    # A terminal widget that only inherits its type from a group.
    group_ref = writer._add_object(
        DictionaryObject(
            {
                NameObject("/FT"): NameObject("/Tx"),
                NameObject("/T"): TextStringObject("address"),
            }
        )
    )
    street_ref = writer._add_object(
        DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/T"): TextStringObject("street"),
                NameObject("/V"): TextStringObject("Main St"),
                NameObject("/Rect"): ArrayObject(FloatObject(item) for item in [40, 200, 240, 220]),
                NameObject("/P"): second.indirect_reference,
                NameObject("/Parent"): group_ref,
            }
        )
    )

    second[NameObject("/Annots")] = ArrayObject([kid_ref, street_ref])
    form = DictionaryObject({NameObject("/Fields"): ArrayObject([parent_ref, street_ref])})
    writer._root_object[NameObject("/AcroForm")] = writer._add_object(form)
    return _write(writer, tmp_path / "hierarchical.pdf")
