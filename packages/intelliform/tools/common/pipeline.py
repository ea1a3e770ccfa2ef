"""Plugin registry and orchestration helpers for IntelliForm tools."""

from __future__ import annotations

from typing import Any, Dict, Iterable

from ...core.exceptions import UnsupportedOperationError
from ...core.utils import get_logger
from .interfaces import BaseTool, FormContext, ToolFactory

LOGGER = get_logger("intelliform.tools")


class ToolRegistry:
    """Registry storing the available form tools by command name."""

    def __init__(self) -> None:
        self._tools: Dict[str, type[BaseTool]] = {}

    def register(self, name: str, tool_class: type[BaseTool]) -> None:
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = tool_class

    def create(self, name: str, context: FormContext) -> BaseTool:
        try:
            tool_class = self._tools[name]
        except KeyError as exc:
            raise UnsupportedOperationError(f"Tool '{name}' is not registered") from exc
        return tool_class(context)

    def run(self, name: str, context: FormContext) -> Any:
        """Create and run ``name``; the result is also stored on the context."""

        LOGGER.debug("Running tool %s on %s", name, context.input_path)
        result = self.create(name, context).run()
        context.resources["result"] = result
        return result

    def names(self) -> Iterable[str]:
        return sorted(self._tools.keys())

    def get(self, name: str) -> type[BaseTool] | None:
        return self._tools.get(name)


registry = ToolRegistry()


def register_tool(name: str):
    def decorator(cls: type[BaseTool]) -> type[BaseTool]:
        registry.register(name, cls)
        return cls

    return decorator


__all__ = ["ToolRegistry", "registry", "register_tool", "FormContext", "BaseTool", "ToolFactory"]
