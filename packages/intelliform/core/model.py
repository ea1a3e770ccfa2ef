"""Shared domain models used across IntelliForm components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping

from .exceptions import FieldDefinitionError, UnsupportedOperationError


class FieldKind(str, Enum):
    """Interactive field variants the builder knows how to synthesize."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    SIGNATURE = "signature"

    @classmethod
    def parse(cls, value: "FieldKind | str") -> "FieldKind":
        if isinstance(value, FieldKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise UnsupportedOperationError(f"Unsupported field type: {value}") from exc


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis aligned rectangle stored as ``(left, bottom, right, top)``."""

    left: float
    bottom: float
    right: float
    top: float

    @classmethod
    def from_placement(cls, x: float, y: float, width: float, height: float) -> "Rect":
        x, y = float(x), float(y)
        return cls(x, y, x + float(width), y + float(height))

    @classmethod
    def from_sequence(cls, values: Iterable[Any]) -> "Rect":
        items = list(values)
        if len(items) != 4:
            raise FieldDefinitionError(f"A rectangle needs exactly 4 numbers, got {len(items)}")
        try:
            left, bottom, right, top = (float(item) for item in items)
        except (TypeError, ValueError) as exc:
            raise FieldDefinitionError(f"Rectangle entries must be numeric: {items!r}") from exc
        return cls(left, bottom, right, top)

    @property
    def x(self) -> float:
        return self.left

    @property
    def y(self) -> float:
        return self.bottom

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    def as_list(self) -> list[float]:
        return [self.left, self.bottom, self.right, self.top]


@dataclass(slots=True)
class PageInfo:
    index: int
    width: float
    height: float
    rotation: int = 0


@dataclass(slots=True)
class DocumentMetadata:
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None


@dataclass(slots=True)
class OpenedDocument:
    path: Path
    page_count: int
    pages: list[PageInfo] = field(default_factory=list)
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)

    def as_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "page_count": self.page_count,
            "pages": [asdict(page) for page in self.pages],
            "metadata": asdict(self.metadata),
        }


_FLAT_KEYS = ("x", "y", "width", "height")


def _payload_text(value: Any, key: str) -> str:
    """Coerce a JSON scalar (or an options list) to the string form fields store."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    if key == "options" and isinstance(value, (list, tuple)):
        return ", ".join(_payload_text(item, key="option") for item in value)
    raise FieldDefinitionError(f"Field {key!r} must be a string, number or boolean, got {value!r}")


@dataclass(slots=True)
class FormField:
    """A single interactive field as exchanged with callers.

    ``rect`` is expressed in caller space (unrotated page box); the builder
    maps it into device space.  ``page`` is a 0-based page index.
    """

    name: str
    kind: FieldKind
    rect: Rect
    page: int = 0
    value: str | None = None
    properties: dict[str, str] = field(default_factory=dict)
    id: str | None = None

    def __post_init__(self) -> None:
        self.kind = FieldKind.parse(self.kind)
        if not self.name or not str(self.name).strip():
            raise FieldDefinitionError("Form fields require a non-empty name")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FormField":
        """Build a field from a UI payload.

        Accepts the 4-element ``rect`` shape used by batch requests or the
        flat ``x``/``y``/``width``/``height`` shape; never both.
        """

        has_rect = payload.get("rect") is not None
        has_flat = any(payload.get(key) is not None for key in _FLAT_KEYS)
        if has_rect and has_flat:
            raise FieldDefinitionError(
                "Field payload must use either 'rect' or 'x'/'y'/'width'/'height', not both"
            )
        if has_rect:
            rect = Rect.from_sequence(payload["rect"])
        elif has_flat:
            missing = [key for key in _FLAT_KEYS if payload.get(key) is None]
            if missing:
                raise FieldDefinitionError(f"Field payload is missing {', '.join(missing)}")
            try:
                rect = Rect.from_placement(*(float(payload[key]) for key in _FLAT_KEYS))
            except (TypeError, ValueError) as exc:
                raise FieldDefinitionError("Field placement entries must be numeric") from exc
        else:
            raise FieldDefinitionError("Field payload has no placement")

        kind = payload.get("field_type", payload.get("type", payload.get("kind")))
        if kind is None:
            raise FieldDefinitionError("Field payload has no type")

        try:
            page = int(payload.get("page", 0))
        except (TypeError, ValueError) as exc:
            raise FieldDefinitionError(f"Invalid page index: {payload.get('page')!r}") from exc

        value = payload.get("value")
        properties = payload.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise FieldDefinitionError("Field properties must be an object")
        return cls(
            name=str(payload.get("name") or ""),
            kind=FieldKind.parse(kind),
            rect=rect,
            page=page,
            value=None if value is None else _payload_text(value, "value"),
            properties={
                str(key): _payload_text(item, str(key)) for key, item in properties.items()
            },
            id=None if payload.get("id") is None else str(payload["id"]),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "field_type": self.kind.value,
            "value": self.value,
            "rect": self.rect.as_list(),
            "x": self.rect.x,
            "y": self.rect.y,
            "width": self.rect.width,
            "height": self.rect.height,
            "page": self.page,
            "properties": dict(self.properties),
        }


__all__ = [
    "FieldKind",
    "Rect",
    "PageInfo",
    "DocumentMetadata",
    "OpenedDocument",
    "FormField",
]
