"""Plugins exposing read-only views of a document and its form."""

from __future__ import annotations

from ...core.exceptions import IntelliFormError, PdfIOError
from ...core.model import FormField, OpenedDocument, PageInfo
from ...core.utils import get_logger
from ...core.validator import ensure_output_parent
from ...forms.export import export_fields
from ...forms.extract import extract_field_values, extract_fields
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("intelliform.tools.inspect")


@register_tool("open")
class OpenTool(BaseTool):
    name = "open"

    def run(self) -> OpenedDocument:
        document = self.context.ensure_parser().parse()
        LOGGER.debug("Opened %s with %d pages", document.path, document.page_count)
        return document


@register_tool("page_info")
class PageInfoTool(BaseTool):
    name = "page_info"

    def run(self) -> PageInfo:
        page = self.context.config.get("page")
        if page is None:
            raise IntelliFormError("page_info requires a 'page' index")
        return self.context.ensure_parser().page_info(int(page))


@register_tool("fields")
class FieldsTool(BaseTool):
    name = "fields"

    def run(self) -> list[FormField] | dict[str, str]:
        graph = self.context.ensure_parser().graph
        if self.context.config.get("values_only"):
            return extract_field_values(graph)
        return extract_fields(graph)


@register_tool("export")
class ExportTool(BaseTool):
    name = "export"

    def run(self) -> str:
        context = self.context
        export_format = context.config.get("format", "json")
        payload = export_fields(extract_fields(context.ensure_parser().graph), export_format)
        if context.output_path is not None:
            destination = ensure_output_parent(context.output_path)
            try:
                destination.write_text(payload, encoding="utf-8")
            except OSError as exc:
                raise PdfIOError(f"Unable to write export to {destination}: {exc}") from exc
            LOGGER.debug("Exported %s field data to %s", export_format, context.output_path)
        return payload
