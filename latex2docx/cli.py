from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional

from latex2docx.adapters.pandoc_adapter import DEFAULT_PANDOC, DEFAULT_REFERENCE_DOC, find_pandoc, require_pandoc
from latex2docx.errors import Latex2DocxError
from latex2docx.pipeline import ConverterConfig, run_pipeline
from latex2docx.report import render_guidance, render_summary, write_json


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _create_reference(args) -> int:
    from latex2docx.adapters.docx_adapter import create_reference_docx

    pandoc = find_pandoc(args.pandoc)
    if not pandoc:
        print("pandoc not found, using the python-docx default template as base")
    path = create_reference_docx(args.create_reference, pandoc=pandoc)
    print(f"Reference template written: {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="latex2docx",
        description="Convert Vestnik MSU (Series 13) LaTeX manuscripts to DOCX via pandoc",
    )
    ap.add_argument("input_tex", nargs="?", help="Path to input .tex")
    ap.add_argument("output_docx", nargs="?", help="Path to output .docx (default: input with .docx suffix)")
    ap.add_argument(
        "--reference-doc",
        default=None,
        help=f"Reference style template (default: ./{DEFAULT_REFERENCE_DOC} when present)",
    )
    ap.add_argument(
        "--create-reference",
        nargs="?",
        const=DEFAULT_REFERENCE_DOC,
        default=None,
        metavar="PATH",
        help=f"Build the journal reference template (default: {DEFAULT_REFERENCE_DOC}) and exit",
    )
    ap.add_argument(
        "--pandoc",
        default=os.environ.get("LATEX2DOCX_PANDOC", DEFAULT_PANDOC),
        help="pandoc executable (or set LATEX2DOCX_PANDOC env var)",
    )
    ap.add_argument("--encoding", default="utf-8", help="Encoding of the input .tex (default: utf-8)")
    ap.add_argument("--report-json", help="Write the run summary as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.create_reference:
        try:
            return _create_reference(args)
        except Latex2DocxError as e:
            _err(f"Error: {e}")
            return 1

    try:
        pandoc = require_pandoc(args.pandoc)
    except Latex2DocxError as e:
        _err(f"Error: {e}")
        return 1

    if not args.input_tex:
        _err("Error: no input file given")
        _err(ap.format_usage().strip())
        return 1

    config = ConverterConfig(pandoc_binary=args.pandoc, reference_doc=args.reference_doc, encoding=args.encoding)
    try:
        payload = run_pipeline(
            input_tex=args.input_tex,
            output_docx=args.output_docx,
            config=config,
            pandoc=pandoc,
            progress=print,
        )
    except Latex2DocxError as e:
        _err(f"Error: {e}")
        return 1

    print(render_summary(payload))
    if args.report_json:
        write_json(args.report_json, payload)
    print(render_guidance(payload["output_docx"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
