"""Error taxonomy shared by every IntelliForm component."""

from __future__ import annotations

from typing import Any


class IntelliFormError(Exception):
    """Base class for all errors raised by :mod:`intelliform`."""

    code = "INTELLIFORM_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class OpenError(IntelliFormError):
    """Raised when a source document cannot be read or parsed at all."""

    code = "OPEN_ERROR"


class MalformedStructureError(IntelliFormError):
    """Raised when a required structural element is missing or ill-shaped."""

    code = "MALFORMED_PDF"


ParseError = MalformedStructureError


class ObjectNotFoundError(MalformedStructureError):
    """Raised when an indirect reference does not resolve inside the graph."""

    code = "OBJECT_NOT_FOUND"

    def __init__(self, object_id: tuple[int, int]) -> None:
        self.object_id = tuple(object_id)
        number, generation = self.object_id
        super().__init__(f"Object {number} {generation} R not found")


class InvalidPageError(IntelliFormError):
    """Raised when a page index lies outside of the document."""

    code = "INVALID_PAGE"

    def __init__(self, page: int, page_count: int | None = None) -> None:
        self.page = page
        self.page_count = page_count
        if page_count is None:
            message = f"Invalid page number: {page}"
        else:
            message = f"Invalid page number: {page} (document has {page_count} pages)"
        super().__init__(message)


class UnsupportedOperationError(IntelliFormError):
    """Raised for requests the PDF format or this library cannot represent."""

    code = "UNSUPPORTED_OPERATION"


class FieldDefinitionError(IntelliFormError):
    """Raised when a caller supplied field payload is inconsistent."""

    code = "INVALID_FIELD"


class PdfIOError(IntelliFormError):
    """Raised when reading or writing at the storage boundary fails."""

    code = "IO_ERROR"


__all__ = [
    "IntelliFormError",
    "OpenError",
    "MalformedStructureError",
    "ParseError",
    "ObjectNotFoundError",
    "InvalidPageError",
    "UnsupportedOperationError",
    "FieldDefinitionError",
    "PdfIOError",
]
