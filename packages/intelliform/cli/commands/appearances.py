"""CLI helpers for flagging appearance regeneration."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import FormContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "appearances", help="Ask viewers to regenerate field appearances"
    )
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Destination PDF path")
    parser.set_defaults(tool_name="appearances", build_context=_build_context)


def _build_context(args) -> FormContext:
    return FormContext(input_path=args.input, output_path=args.output)
