"""
Turn a finals schedule PDF into plain text.

The layout parsers are tuned to poppler's `pdftotext` output, which is the
default. pdfplumber is available as a pure-Python alternative, but its text
flow differs and not every layout survives it.
"""
from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

import pdfplumber

logger = logging.getLogger(__name__)

EXTRACTORS = ("pdftotext", "pdfplumber")


class PdfTextError(RuntimeError):
    """The PDF could not be converted to text."""


def _pdftotext(pdf_path: Path) -> str:
    try:
        result = subprocess.run(
            ["pdftotext", str(pdf_path), "-"],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise PdfTextError(
            "pdftotext not found. Install poppler (e.g. `brew install poppler` "
            "or `apt install poppler-utils`) or use --extractor pdfplumber."
        ) from e

    if result.returncode != 0:
        detail = result.stderr.strip() or "Unknown error"
        raise PdfTextError(f"Failed to extract text from PDF: {detail}")
    return result.stdout


def _pdfplumber(pdf_path: Path) -> str:
    pages: list[str] = []
    with pdfplumber.open(pdf_path) as pdf:
        for page in pdf.pages:
            text = (page.extract_text() or "").strip()
            if text:
                pages.append(text)
    return "\n\n".join(pages)


def extract_pdf_text(path: str | Path, extractor: str = "pdftotext") -> str:
    """
    Extract the text of a local PDF file.
    :param path: Path to the PDF.
    :param extractor: "pdftotext" (default) or "pdfplumber".
    :return: The document text.
    """
    if extractor not in EXTRACTORS:
        raise ValueError(f"Unsupported extractor: {extractor}. Use pdftotext or pdfplumber.")

    pdf_path = Path(path)
    if not pdf_path.is_file():
        raise FileNotFoundError(f"File not found: {pdf_path}")

    logger.info("Extracting text from %s with %s", pdf_path, extractor)
    if extractor == "pdfplumber":
        return _pdfplumber(pdf_path)
    return _pdftotext(pdf_path)


def extract_pdf_text_from_bytes(content: bytes, extractor: str = "pdftotext") -> str:
    """Same as extract_pdf_text, for a PDF held in memory."""
    if not content:
        raise ValueError("PDF content is required")
    with tempfile.TemporaryDirectory() as tmp_dir:
        pdf_path = Path(tmp_dir) / "finals_schedule.pdf"
        pdf_path.write_bytes(content)
        return extract_pdf_text(pdf_path, extractor)
