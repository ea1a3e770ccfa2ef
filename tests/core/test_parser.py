from __future__ import annotations

from pathlib import Path

import pytest
from pypdf.generic import ArrayObject, FloatObject, NumberObject

from intelliform.core.exceptions import InvalidPageError, MalformedStructureError
from intelliform.core.parser import PDFParser, decode_text, normalize_rotation


def test_parse_reports_pages_and_metadata(sample_pdf: Path) -> None:
    document = PDFParser(sample_pdf).parse()

    assert document.page_count == 5
    assert [page.index for page in document.pages] == [0, 1, 2, 3, 4]
    assert document.pages[0].width == 200
    assert document.pages[0].height == 200
    assert document.pages[0].rotation == 0
    assert document.metadata.title == "Sample"
    assert document.metadata.producer == "intelliform-tests"


def test_page_info_reads_rotation(rotated_pdf: Path) -> None:
    info = PDFParser(rotated_pdf).page_info(0)

    assert (info.width, info.height, info.rotation) == (612, 792, 90)


def test_page_info_out_of_range(sample_pdf: Path) -> None:
    parser = PDFParser(sample_pdf)

    with pytest.raises(InvalidPageError):
        parser.page_info(5)
    with pytest.raises(InvalidPageError):
        parser.page_info(-1)


def test_missing_media_box_is_malformed(pdf_factory) -> None:
    path = pdf_factory("no_box.pdf", MediaBox=None)

    with pytest.raises(MalformedStructureError, match="Missing MediaBox"):
        PDFParser(path).page_info(0)


def test_short_media_box_is_malformed(pdf_factory) -> None:
    path = pdf_factory("short_box.pdf", MediaBox=ArrayObject([FloatObject(0), FloatObject(0)]))

    with pytest.raises(MalformedStructureError, match="Invalid MediaBox format"):
        PDFParser(path).page_info(0)


def test_media_box_offset_origin(pdf_factory) -> None:
    box = ArrayObject([FloatObject(10), FloatObject(20), FloatObject(110), FloatObject(220)])
    info = PDFParser(pdf_factory("offset.pdf", MediaBox=box)).page_info(0)

    assert (info.width, info.height) == (100, 200)


def test_odd_rotation_is_normalized(pdf_factory) -> None:
    info = PDFParser(pdf_factory("odd.pdf", Rotate=NumberObject(-90))).page_info(0)

    assert info.rotation == 270


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 0), (0, 0), (90, 90), (450, 90), (-90, 270), (180.0, 180), (44, 0), (46, 90)],
)
def test_normalize_rotation(value, expected) -> None:
    assert normalize_rotation(value) == expected


def test_normalize_rotation_strict_mode_rejects_non_quarter_turns() -> None:
    assert normalize_rotation(270, strict=True) == 270
    with pytest.raises(MalformedStructureError):
        normalize_rotation(45, strict=True)


def test_strict_rotation_from_environment(pdf_factory, monkeypatch) -> None:
    path = pdf_factory("strict.pdf", Rotate=NumberObject(45))
    monkeypatch.setenv("INTELLIFORM_STRICT_ROTATION", "yes")

    with pytest.raises(MalformedStructureError):
        PDFParser(path).page_info(0)


def test_metadata_without_info_dictionary(letter_pdf: Path) -> None:
    metadata = PDFParser(letter_pdf).metadata()

    assert metadata.title is None
    assert metadata.author is None
    assert metadata.keywords is None


def test_decode_text_ignores_non_strings() -> None:
    assert decode_text("hello") == "hello"
    assert decode_text(b"caf\xe9") == "caf\xe9"
    assert decode_text(NumberObject(3)) is None
    assert decode_text(None) is None


def test_extract_text_of_blank_page(sample_pdf: Path) -> None:
    assert PDFParser(sample_pdf).extract_text(0) == ""
