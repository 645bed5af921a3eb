"""
Data model shared by every finals schedule parser.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, List, Optional

# Every CRN in the registrar's numbering scheme is this many digits wide.
# Merged digit runs ("1458814589") are split on this width.
CRN_DIGITS = 5


class FormatVariant(enum.Enum):
    """Known finals schedule layouts, as rendered by pdftotext."""

    ROW_MAJOR_WITH_COMBINED_COLUMN = "row_major"
    COLUMN_BLOCK_ZIPPER = "column_blocks"
    SECTION_LABELED = "section_labeled"


@dataclass
class ExamEntry:
    """
    One exam sitting for one CRN.

    start_time / end_time are 24h integers: 900 = 9:00, 1345 = 13:45.
    """
    crn: int
    combined_crns: List[int] = field(default_factory=list)
    date: Optional[date] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    location: Optional[str] = None

    def start_datetime(self) -> datetime | None:
        return _combine(self.date, self.start_time)

    def end_datetime(self) -> datetime | None:
        return _combine(self.date, self.end_time)

    def to_dict(self) -> dict:
        return {
            "crn": self.crn,
            "combined_crns": list(self.combined_crns),
            "date": self.date.isoformat() if self.date else None,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "location": self.location,
        }


def _combine(day: date | None, hhmm: int | None) -> datetime | None:
    if day is None or hhmm is None:
        return None
    return datetime.combine(day, time(hhmm // 100, hhmm % 100))


def first_occurrence_per_crn(entries: Iterable[ExamEntry]) -> List[ExamEntry]:
    """Keep only the first entry seen for each CRN, preserving order."""
    seen: set[int] = set()
    unique: List[ExamEntry] = []
    for entry in entries:
        if entry.crn in seen:
            continue
        seen.add(entry.crn)
        unique.append(entry)
    return unique
