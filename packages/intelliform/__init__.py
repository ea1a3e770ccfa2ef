"""IntelliForm: inject interactive form fields into PDFs and read them back."""

from __future__ import annotations

from .api import (
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
from .core.config import FormSettings, load_settings
from .core.exceptions import (
    FieldDefinitionError,
    IntelliFormError,
    InvalidPageError,
    MalformedStructureError,
    ObjectNotFoundError,
    OpenError,
    ParseError,
    PdfIOError,
    UnsupportedOperationError,
)
from .core.graph import DocumentGraph, ObjectId
from .core.model import DocumentMetadata, FieldKind, FormField, OpenedDocument, PageInfo, Rect
from .core.parser import PDFParser
from .tools import load_builtin_plugins
from .tools.common.interfaces import FormContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()

__all__ = [
    "open_document",
    "get_page_info",
    "get_total_pages",
    "get_form_fields",
    "get_form_values",
    "add_form_field",
    "add_form_fields",
    "generate_appearance_streams",
    "transform_coordinates",
    "extract_text",
    "export_form_data",
    "FormSettings",
    "load_settings",
    "IntelliFormError",
    "OpenError",
    "MalformedStructureError",
    "ParseError",
    "ObjectNotFoundError",
    "InvalidPageError",
    "UnsupportedOperationError",
    "FieldDefinitionError",
    "PdfIOError",
    "DocumentGraph",
    "ObjectId",
    "PDFParser",
    "FieldKind",
    "Rect",
    "FormField",
    "PageInfo",
    "DocumentMetadata",
    "OpenedDocument",
    "FormContext",
    "ToolRegistry",
    "registry",
    "register_tool",
    "load_builtin_plugins",
]
