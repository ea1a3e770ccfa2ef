"""CLI helpers for adding form fields."""

from __future__ import annotations

import json
from argparse import ArgumentParser, _SubParsersAction
from pathlib import Path

from ...core.exceptions import FieldDefinitionError
from ...tools.common.interfaces import FormContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("add", help="Add form fields to a PDF")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Destination PDF path")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--fields", dest="fields_file", help="JSON file holding a list of fields")
    source.add_argument(
        "--field",
        dest="field_specs",
        action="append",
        help="Inline JSON object describing one field (repeatable)",
    )
    parser.set_defaults(tool_name="add_fields", build_context=_build_context)


def _load_fields(args) -> list[dict]:
    try:
        if args.fields_file:
            payload = json.loads(Path(args.fields_file).read_text(encoding="utf-8"))
        else:
            payload = [json.loads(spec) for spec in args.field_specs]
    except (OSError, ValueError) as exc:
        raise FieldDefinitionError(f"Unable to read field definitions: {exc}") from exc
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise FieldDefinitionError("Field definitions must be JSON objects")
    return payload


def _build_context(args) -> FormContext:
    return FormContext(
        input_path=args.input,
        output_path=args.output,
        config={"fields": _load_fields(args)},
    )
