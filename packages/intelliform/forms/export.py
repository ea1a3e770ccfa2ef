"""Structured and tabular export views over extracted fields."""

from __future__ import annotations

import csv
import io
import json
from typing import Iterable

from ..core.exceptions import UnsupportedOperationError
from ..core.model import FormField

__all__ = ["CSV_HEADER", "EXPORT_FORMATS", "fields_to_records", "fields_to_json", "fields_to_csv", "export_fields"]

CSV_HEADER = ("name", "type", "value", "x", "y", "width", "height", "page")
EXPORT_FORMATS = ("json", "csv")


def _format_number(value: float) -> str:
    """Render whole numbers without a trailing ``.0``."""

    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def fields_to_records(fields: Iterable[FormField]) -> list[dict[str, object]]:
    return [field.as_dict() for field in fields]


def fields_to_json(fields: Iterable[FormField]) -> str:
    return json.dumps(fields_to_records(fields))


def fields_to_csv(fields: Iterable[FormField]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for field in fields:
        writer.writerow(
            [
                field.name,
                field.kind.value,
                field.value if field.value is not None else "",
                _format_number(field.rect.x),
                _format_number(field.rect.y),
                _format_number(field.rect.width),
                _format_number(field.rect.height),
                field.page,
            ]
        )
    return buffer.getvalue()


def export_fields(fields: Iterable[FormField], format: str) -> str:
    if format == "json":
        return fields_to_json(fields)
    if format == "csv":
        return fields_to_csv(fields)
    raise UnsupportedOperationError(f"Unsupported export format: {format}")
