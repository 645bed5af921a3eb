"""
Strip known pdftotext artefacts from finals schedule text before parsing.

Every rule works on single lines and never removes a line break: blank lines
separate the column blocks of some layouts.
"""
from __future__ import annotations

import re

_NOISE_RULES = (
    # "* ARCH1500 ..." amended rows
    (re.compile(r"^(?:\*[ \t]*)+", re.M), ""),
    # amendment annotation column
    (re.compile(r"[ \t]*Date & Time Change[ \t]*$", re.I | re.M), ""),
    # info column header and content
    (re.compile(r"FINAL SCHEDULE INFORMATION.*$", re.I | re.M), ""),
    # footer datestamp
    (re.compile(r"Schedule as of [\d/]+[ \t]*$", re.I | re.M), ""),
    # "UPDATED FALL 2025" -> "FALL 2025"
    (re.compile(r"UPDATED[ \t]+(?=(?:FALL|SPRING|SUMMER|WINTER)\b)", re.I), ""),
)


def normalize(raw_text: str) -> str:
    """Remove amendment markers, annotations, footers and stale prefixes."""
    text = raw_text
    for pattern, replacement in _NOISE_RULES:
        text = pattern.sub(replacement, text)
    return text
