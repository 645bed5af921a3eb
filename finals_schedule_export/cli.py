"""
Command-line interface: parse a finals schedule and export it to file.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pytz

from . import __version__
from .export import DEFAULT_TIMEZONE, export
from .models import CRN_DIGITS
from .pdf_text import EXTRACTORS, PdfTextError, extract_pdf_text
from .registry import UnrecognizedFormatError, detect_format, parse_finals_schedule


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _read_input(path: Path, extractor: str) -> str:
    """PDFs go through the text extractor; anything else is read as text."""
    if path.suffix.lower() == ".pdf":
        return extract_pdf_text(path, extractor)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Export a finals exam schedule to ICS / CSV / JSON.\n"
            "- INPUT is the schedule PDF, or text already extracted with pdftotext."
        ),
    )
    parser.add_argument("input", metavar="INPUT", help="Finals schedule PDF or text file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-o",
        "--output",
        default="finals_schedule",
        help="Output path (without extension). Default: finals_schedule",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="ics",
        help="Export format. Default: ics",
    )
    parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help=f"(ics) Timezone of the exam times. Default: {DEFAULT_TIMEZONE}",
    )
    parser.add_argument(
        "--extractor",
        choices=list(EXTRACTORS),
        default="pdftotext",
        help="PDF text extractor. Default: pdftotext (requires poppler).",
    )
    parser.add_argument(
        "--crn-digits",
        type=int,
        default=CRN_DIGITS,
        help=f"Width of a CRN, used to split merged CRN runs. Default: {CRN_DIGITS}",
    )
    parser.add_argument(
        "--best-effort",
        action="store_true",
        help="For unrecognized layouts, try every parser and keep the largest result instead of failing.",
    )
    parser.add_argument(
        "--detect",
        action="store_true",
        help="Only print the detected schedule layout, then exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or parsing details (-vv).",
    )
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.crn_digits < 1:
        print("Error: --crn-digits must be a positive integer", file=sys.stderr)
        return 1
    if args.format == "ics" and args.timezone not in pytz.all_timezones_set:
        print(f"Error: unknown timezone: {args.timezone}", file=sys.stderr)
        return 1

    try:
        text = _read_input(Path(args.input), args.extractor)
    except (OSError, PdfTextError) as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        return 1

    if args.detect:
        variant = detect_format(text)
        print(variant.value if variant else "unknown")
        return 0

    try:
        entries = parse_finals_schedule(
            text,
            crn_digits=args.crn_digits,
            best_effort=args.best_effort,
        )
    except UnrecognizedFormatError as e:
        print(f"Error: {e}. Use --best-effort to try every parser.", file=sys.stderr)
        return 1

    ext = {"ics": ".ics", "csv": ".csv", "json": ".json"}[args.format]
    out_path = Path(args.output).with_suffix(ext) if Path(args.output).suffix else Path(args.output + ext)
    export(entries, out_path, args.format, tz_name=args.timezone)
    print(f"Exported {len(entries)} exam(s) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
