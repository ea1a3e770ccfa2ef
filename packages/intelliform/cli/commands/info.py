"""CLI helpers for document and page inspection."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import FormContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    info_parser = subparsers.add_parser("info", help="Show metadata and page geometry")
    info_parser.add_argument("input", help="Input PDF file")
    info_parser.set_defaults(tool_name="open", build_context=_build_context)

    page_parser = subparsers.add_parser("page-info", help="Show the geometry of one page")
    page_parser.add_argument("input", help="Input PDF file")
    page_parser.add_argument("page", type=int, help="0-based page index")
    page_parser.set_defaults(tool_name="page_info", build_context=_build_page_context)


def _build_context(args) -> FormContext:
    return FormContext(input_path=args.input)


def _build_page_context(args) -> FormContext:
    return FormContext(input_path=args.input, config={"page": args.page})
