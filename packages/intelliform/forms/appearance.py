"""Checkbox appearance streams."""

from __future__ import annotations

from pypdf.generic import ArrayObject, DecodedStreamObject, FloatObject, NameObject, NumberObject

__all__ = ["CHECKED_CONTENT", "UNCHECKED_CONTENT", "checkbox_appearance"]

UNCHECKED_CONTENT = b"/ZaDb 12 Tf 0 0 0 rg 0.3 0.3 0.4 0.4 re f 0.2 0.2 0.6 0.6 re W n"
# ZapfDingbats glyph "4" is the check mark.
CHECKED_CONTENT = UNCHECKED_CONTENT + b" BT /ZaDb 12 Tf 0 0 Td (4) Tj ET"


def checkbox_appearance(checked: bool) -> DecodedStreamObject:
    """Build the Form XObject drawn for one checkbox state."""

    stream = DecodedStreamObject()
    stream[NameObject("/Type")] = NameObject("/XObject")
    stream[NameObject("/Subtype")] = NameObject("/Form")
    stream[NameObject("/FormType")] = NumberObject(1)
    stream[NameObject("/BBox")] = ArrayObject(
        [FloatObject(0), FloatObject(0), FloatObject(1), FloatObject(1)]
    )
    stream.set_data(CHECKED_CONTENT if checked else UNCHECKED_CONTENT)
    return stream
