"""
Pick the right layout parser for a finals schedule and run it.

Parsers are checked in order; the first whose matches() accepts the text
wins. Register new layouts in PARSERS.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .column_blocks import ColumnBlockParser
from .models import CRN_DIGITS, ExamEntry, FormatVariant
from .normalize import normalize
from .row_major import RowMajorParser
from .section_labeled import SectionLabeledParser

logger = logging.getLogger(__name__)

# Order matters: SectionLabeled must run before ColumnBlock because both
# layouts mention EXAM-DATE; only the standalone header line tells them apart.
PARSERS = (
    SectionLabeledParser,
    ColumnBlockParser,
    RowMajorParser,
)


class UnrecognizedFormatError(ValueError):
    """No known layout claims the schedule text."""


def classify(normalized_text: str) -> Optional[FormatVariant]:
    for parser_cls in PARSERS:
        if parser_cls.matches(normalized_text):
            return parser_cls.variant
    return None


def detect_format(raw_text: str) -> Optional[FormatVariant]:
    """Normalize then classify; None when no layout matches."""
    return classify(normalize(raw_text))


def parser_for(variant: FormatVariant, crn_digits: int = CRN_DIGITS):
    for parser_cls in PARSERS:
        if parser_cls.variant is variant:
            return parser_cls(crn_digits=crn_digits)
    raise ValueError(f"No parser registered for {variant}")


def _best_effort(text: str, crn_digits: int) -> List[ExamEntry]:
    """Run every parser and keep the one that yields the most entries."""
    best_name, best_entries = None, []
    for parser_cls in PARSERS:
        entries = parser_cls(crn_digits=crn_digits).parse(text)
        if best_name is None or len(entries) > len(best_entries):
            best_name, best_entries = parser_cls.__name__, entries
    logger.warning(
        "Unknown finals schedule format; falling back to %s (%d entries)",
        best_name, len(best_entries),
    )
    return best_entries


def parse_finals_schedule(
    raw_text: str,
    *,
    crn_digits: int = CRN_DIGITS,
    best_effort: bool = False,
) -> List[ExamEntry]:
    """
    Parse pdftotext output of a finals schedule into exam entries.

    Raises UnrecognizedFormatError when no layout matches, unless
    best_effort is set, in which case every parser is tried and the largest
    result is returned.
    """
    text = normalize(raw_text)
    variant = classify(text)

    if variant is None:
        if best_effort:
            return _best_effort(text, crn_digits)
        raise UnrecognizedFormatError(
            "Unrecognized finals schedule format: no known header tokens found"
        )

    parser = parser_for(variant, crn_digits)
    logger.info("Finals schedule parser: %s", type(parser).__name__)
    entries = parser.parse(text)
    logger.info("Parsed %d exam entries", len(entries))
    return entries
