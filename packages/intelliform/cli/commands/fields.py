"""CLI helpers for listing form fields."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import FormContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("fields", help="List the form fields of a PDF")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument(
        "--values",
        action="store_true",
        help="Only print the name to value mapping",
    )
    parser.set_defaults(tool_name="fields", build_context=_build_context)


def _build_context(args) -> FormContext:
    return FormContext(input_path=args.input, config={"values_only": args.values})
