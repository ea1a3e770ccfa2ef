"""CLI helpers for exporting form data."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...forms.export import EXPORT_FORMATS
from ...tools.common.interfaces import FormContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("export", help="Export form fields as JSON or CSV")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default="json")
    parser.add_argument("--output", default=None, help="Write the export to this file")
    parser.set_defaults(tool_name="export", build_context=_build_context)


def _build_context(args) -> FormContext:
    return FormContext(
        input_path=args.input,
        output_path=args.output,
        config={"format": args.format},
    )
