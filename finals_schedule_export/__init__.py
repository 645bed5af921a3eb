"""
Extract final exam entries from finals schedule PDFs and export them.
"""
from __future__ import annotations

__version__ = "0.1.0"

from .models import CRN_DIGITS, ExamEntry, FormatVariant
from .registry import UnrecognizedFormatError, detect_format, parse_finals_schedule

__all__ = [
    "CRN_DIGITS",
    "ExamEntry",
    "FormatVariant",
    "UnrecognizedFormatError",
    "detect_format",
    "parse_finals_schedule",
]
