"""Command line interface for the IntelliForm toolkit."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Sequence

from ..core.exceptions import IntelliFormError
from ..core.model import FormField, OpenedDocument
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import FormContext
from ..tools.common.pipeline import registry
from .commands import add, appearances, export, fields, info

COMMAND_MODULES = [info, fields, add, appearances, export]


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="intelliform", description="IntelliForm CLI")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def _resolve_tool_name(args, context: FormContext) -> str:
    tool_name = getattr(args, "tool_name", None)
    if tool_name:
        return tool_name
    if "tool_name" in context.resources:
        return context.resources["tool_name"]
    raise SystemExit("Unable to determine tool name from arguments")


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, (OpenedDocument, FormField)):
        return result.as_dict()
    if is_dataclass(result):
        return asdict(result)
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    if isinstance(result, Path):
        return str(result)
    return result


def _emit(result: Any) -> None:
    if isinstance(result, str):
        sys.stdout.write(result if result.endswith("\n") else result + "\n")
        return
    json.dump(_to_jsonable(result), sys.stdout, indent=2)
    sys.stdout.write("\n")


def run(argv: Sequence[str] | None = None) -> Any:
    """Parse ``argv``, run the selected tool and print its result."""

    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    try:
        context: FormContext = args.build_context(args)
        tool_name = _resolve_tool_name(args, context)
        result = registry.run(tool_name, context)
    except IntelliFormError as exc:
        json.dump(exc.as_dict(), sys.stderr)
        sys.stderr.write("\n")
        raise SystemExit(1) from exc
    _emit(result)
    return result


def main(argv: Sequence[str] | None = None) -> int:
    run(argv)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
