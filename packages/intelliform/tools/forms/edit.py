"""Plugins that mutate a document's form and write the result."""

from __future__ import annotations

from pathlib import Path

from ... import api
from ...core.exceptions import IntelliFormError
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("intelliform.tools.edit")


@register_tool("add_fields")
class AddFieldsTool(BaseTool):
    name = "add_fields"

    def run(self) -> Path:
        context = self.context
        source = context.require_input()
        output = context.output_path or source
        fields = context.config.get("fields")
        if fields is None:
            raise IntelliFormError("add_fields requires a 'fields' list")

        LOGGER.debug("Adding %d fields from %s to %s", len(fields), source, output)
        return api.add_form_fields(source, fields, output)


@register_tool("appearances")
class AppearancesTool(BaseTool):
    name = "appearances"

    def run(self) -> Path:
        context = self.context
        source = context.require_input()
        output = context.output_path or source
        return api.generate_appearance_streams(source, output)
