"""AcroForm synthesis, field building and extraction."""

from __future__ import annotations

from .acroform import ensure_form_root, find_form_root, set_need_appearances
from .appearance import checkbox_appearance
from .export import export_fields
from .extract import extract_field_values, extract_fields
from .fields import add_field, add_fields, build_field_dictionary
from .geometry import rotate_quarter, transform_point, transform_rect

__all__ = [
    "ensure_form_root",
    "find_form_root",
    "set_need_appearances",
    "checkbox_appearance",
    "export_fields",
    "extract_field_values",
    "extract_fields",
    "add_field",
    "add_fields",
    "build_field_dictionary",
    "rotate_quarter",
    "transform_point",
    "transform_rect",
]
