"""In-memory PDF object graph used as the mutation arena for form edits.

A :class:`DocumentGraph` owns every indirect object of one document plus the
trailer that roots it.  Objects are the :mod:`pypdf.generic` classes, loaded
through :class:`pypdf.PdfReader` and serialized again by
:mod:`intelliform.core.writer`.  Mutation is additive only; changes made inside
:meth:`DocumentGraph.transaction` are journaled so a failed step can be undone.
"""

from __future__ import annotations

from contextlib import contextmanager
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, Iterator, NamedTuple

from pypdf import PdfReader
from pypdf.errors import PyPdfError
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    PdfObject,
    StreamObject,
)

from .config import FormSettings, load_settings
from .exceptions import (
    InvalidPageError,
    MalformedStructureError,
    ObjectNotFoundError,
    OpenError,
    PdfIOError,
    UnsupportedOperationError,
)
from .utils import get_logger, resolve_path

__all__ = ["ObjectId", "DocumentGraph"]

LOGGER = get_logger("intelliform.graph")

_TRAILER_KEYS = ("/Root", "/Info", "/ID")
_CONTAINER_TYPES = {"/XRef", "/ObjStm"}
_MISSING = object()


class ObjectId(NamedTuple):
    number: int
    generation: int = 0

    @classmethod
    def of(cls, reference: IndirectObject) -> "ObjectId":
        return cls(int(reference.idnum), int(reference.generation))

    def __str__(self) -> str:
        return f"{self.number} {self.generation} R"


class DocumentGraph:
    """Arena of indirect objects plus the trailer that roots them."""

    def __init__(
        self,
        objects: dict[ObjectId, PdfObject] | None = None,
        trailer: DictionaryObject | None = None,
        *,
        header: str = "%PDF-1.7",
        settings: FormSettings | None = None,
    ) -> None:
        self._objects: dict[ObjectId, PdfObject] = dict(objects or {})
        self.trailer = trailer if trailer is not None else DictionaryObject()
        self.header = header
        self.settings = settings or load_settings()
        self._next_number = max((oid.number for oid in self._objects), default=0) + 1
        self._journals: list[list[Callable[[], None]]] = []

    # -- Loading -------------------------------------------------------------

    @classmethod
    def load(cls, source: str | Path, *, settings: FormSettings | None = None) -> "DocumentGraph":
        path = resolve_path(source)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise OpenError(f"PDF not found: {path}") from exc
        except OSError as exc:
            raise PdfIOError(f"Unable to read PDF {path}: {exc}") from exc
        LOGGER.debug("Loading object graph from %s (%d bytes)", path, len(data))
        return cls.from_bytes(data, settings=settings)

    @classmethod
    def from_bytes(cls, data: bytes, *, settings: FormSettings | None = None) -> "DocumentGraph":
        try:
            reader = PdfReader(BytesIO(data))
        except (PyPdfError, ValueError, KeyError, IndexError, TypeError) as exc:
            raise OpenError(f"Unable to read PDF: {exc}") from exc

        if reader.is_encrypted:
            raise UnsupportedOperationError("Encrypted PDF documents are not supported")

        return cls.from_reader(reader, settings=settings)

    @classmethod
    def from_reader(cls, reader: PdfReader, *, settings: FormSettings | None = None) -> "DocumentGraph":
        candidates: dict[int, int] = {}
        for generation, entries in reader.xref.items():
            for number in entries:
                number = int(number)
                # Keep the newest generation when a number was reused.
                if number not in candidates or int(generation) > candidates[number]:
                    candidates[number] = int(generation)
        for number in reader.xref_objStm:
            candidates.setdefault(int(number), 0)

        objects: dict[ObjectId, PdfObject] = {}
        for number in sorted(candidates):
            if number <= 0:
                continue
            oid = ObjectId(number, candidates[number])
            try:
                obj = reader.get_object(IndirectObject(oid.number, oid.generation, reader))
            except (PyPdfError, ValueError, KeyError, IndexError, TypeError) as exc:
                raise OpenError(f"Unable to read object {oid}: {exc}") from exc
            if obj is None:
                continue
            if isinstance(obj, StreamObject) and obj.get("/Type") in _CONTAINER_TYPES:
                continue
            objects[oid] = obj

        trailer = DictionaryObject()
        for key in _TRAILER_KEYS:
            value = reader.trailer.get(key)
            if value is not None:
                trailer[NameObject(key)] = value

        if not isinstance(trailer.get("/Root"), IndirectObject):
            raise OpenError("Trailer has no indirect /Root entry")

        LOGGER.debug("Loaded %d objects", len(objects))
        return cls(objects, trailer, header=reader.pdf_header or "%PDF-1.7", settings=settings)

    # -- Arena access --------------------------------------------------------

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, oid: object) -> bool:
        return oid in self._objects

    def ids(self) -> list[ObjectId]:
        return sorted(self._objects)

    def add(self, obj: PdfObject) -> ObjectId:
        """Register ``obj`` under a freshly allocated id."""

        if isinstance(obj, IndirectObject):
            raise MalformedStructureError("Cannot register a reference as an indirect object")
        oid = ObjectId(self._next_number, 0)
        previous_next = self._next_number
        self._objects[oid] = obj
        self._next_number += 1
        LOGGER.debug("Registered %s as %s", type(obj).__name__, oid)

        def _undo() -> None:
            self._objects.pop(oid, None)
            self._next_number = previous_next

        self._record(_undo)
        return oid

    def get(self, oid: ObjectId | tuple[int, int] | IndirectObject) -> PdfObject:
        """Return the live object for ``oid``; edits apply to the graph."""

        key = self._key(oid)
        try:
            return self._objects[key]
        except KeyError:
            raise ObjectNotFoundError(key) from None

    def get_dictionary(self, oid: ObjectId | tuple[int, int] | IndirectObject) -> DictionaryObject:
        obj = self.get(oid)
        if not isinstance(obj, DictionaryObject):
            raise MalformedStructureError(f"Object {self._key(oid)} is not a dictionary")
        return obj

    def reference(self, oid: ObjectId | tuple[int, int]) -> IndirectObject:
        key = self._key(oid)
        return IndirectObject(key.number, key.generation, self)

    def get_object(self, reference: IndirectObject | int) -> PdfObject:
        """pypdf hook so ``IndirectObject.get_object()`` resolves against the graph."""

        if isinstance(reference, int):
            return self.get(ObjectId(reference, 0))
        return self.get(reference)

    def resolve(self, obj: Any) -> Any:
        """Follow exactly one level of indirection."""

        if isinstance(obj, IndirectObject):
            return self.get(obj)
        return obj

    def resolve_deep(self, obj: Any) -> Any:
        hops = 0
        while isinstance(obj, IndirectObject):
            if hops >= self.settings.max_reference_hops:
                raise MalformedStructureError(
                    f"Reference chain longer than {self.settings.max_reference_hops} hops"
                )
            obj = self.get(obj)
            hops += 1
        return obj

    # -- Trailer / catalog ---------------------------------------------------

    @property
    def root_id(self) -> ObjectId:
        root = self.trailer.get("/Root")
        if not isinstance(root, IndirectObject):
            raise MalformedStructureError("Missing Root dictionary")
        return ObjectId.of(root)

    @property
    def root(self) -> DictionaryObject:
        return self.get_dictionary(self.root_id)

    @property
    def info(self) -> DictionaryObject | None:
        info = self.trailer.get("/Info")
        if info is None:
            return None
        resolved = self.resolve_deep(info)
        return resolved if isinstance(resolved, DictionaryObject) else None

    # -- Page tree -----------------------------------------------------------

    def pages(self) -> list[ObjectId]:
        """Return page ids in document order."""

        pages_ref = self.root.get("/Pages")
        if not isinstance(pages_ref, IndirectObject):
            raise MalformedStructureError("Catalog has no indirect /Pages entry")

        ordered: list[ObjectId] = []
        visited: set[ObjectId] = set()

        def _walk(node_id: ObjectId) -> None:
            if node_id in visited:
                LOGGER.warning("Page tree cycle detected at %s", node_id)
                return
            visited.add(node_id)
            node = self.get_dictionary(node_id)
            kids = node.get("/Kids")
            if node.get("/Type") == "/Page" or kids is None:
                ordered.append(node_id)
                return
            kids = self.resolve_deep(kids)
            if not isinstance(kids, ArrayObject):
                raise MalformedStructureError(f"Page tree node {node_id} has invalid /Kids")
            for kid in kids:
                if not isinstance(kid, IndirectObject):
                    raise MalformedStructureError(f"Page tree node {node_id} has a direct kid")
                _walk(ObjectId.of(kid))

        _walk(ObjectId.of(pages_ref))
        return ordered

    def page_count(self) -> int:
        return len(self.pages())

    def page_id(self, index: int) -> ObjectId:
        """Resolve a 0-based page index (1-based page order) to its object id."""

        pages = self.pages()
        if index < 0 or index >= len(pages):
            raise InvalidPageError(index, len(pages))
        return pages[index]

    # -- Journaled mutation --------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["DocumentGraph"]:
        """Undo every journaled change made in the block if it raises."""

        journal: list[Callable[[], None]] = []
        self._journals.append(journal)
        try:
            yield self
        except BaseException:
            self._journals.pop()
            LOGGER.debug("Rolling back %d graph changes", len(journal))
            for undo in reversed(journal):
                undo()
            raise
        else:
            self._journals.pop()
            if self._journals:
                self._journals[-1].extend(journal)

    def set_item(self, target: DictionaryObject, key: str, value: PdfObject) -> None:
        name = NameObject(key)
        previous = target.get(name, _MISSING)
        target[name] = value

        def _undo() -> None:
            if previous is _MISSING:
                target.pop(name, None)
            else:
                target[name] = previous

        self._record(_undo)

    def append(self, target: ArrayObject, value: PdfObject) -> None:
        target.append(value)
        self._record(target.pop)

    def _record(self, undo: Callable[[], None]) -> None:
        if self._journals:
            self._journals[-1].append(undo)

    @staticmethod
    def _key(oid: ObjectId | tuple[int, int] | IndirectObject) -> ObjectId:
        if isinstance(oid, IndirectObject):
            return ObjectId.of(oid)
        if isinstance(oid, ObjectId):
            return oid
        number, generation = oid
        return ObjectId(int(number), int(generation))
