"""Core interfaces and context objects shared by IntelliForm tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ...core.exceptions import IntelliFormError
from ...core.parser import PDFParser
from ...core.utils import resolve_path


@dataclass
class FormContext:
    """Holds shared execution state for a tool invocation."""

    input_path: Path | None = None
    output_path: Path | None = None
    parser: PDFParser | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.input_path, (str, Path)):
            self.input_path = resolve_path(self.input_path)
        if isinstance(self.output_path, (str, Path)):
            self.output_path = resolve_path(self.output_path)

    def require_input(self) -> Path:
        if self.input_path is None:
            raise IntelliFormError("This tool requires an input PDF path")
        return self.input_path

    def ensure_parser(self) -> PDFParser:
        if self.parser is None:
            self.parser = PDFParser(self.require_input())
        return self.parser


class BaseTool:
    """Base class for all pluggable IntelliForm tools."""

    name: str

    def __init__(self, context: FormContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


ToolFactory = Callable[[FormContext], BaseTool]
