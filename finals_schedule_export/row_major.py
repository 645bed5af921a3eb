"""
Row-major layout with a MULTI-SECTION CRNS column (Fall 2024, Spring 2025,
Summer 2025).

pdftotext keeps each row's cells together, one value per line:

    30864
    30864-30862-30863        multi-section chain (Fall 2024 / Spring 2025)
    Yari, Nasser
    Friday, August 8, 2025
    12:45PM-2:45PM
    BEATT 426

Rows are anchored on standalone CRN lines. In Fall 2024 the date, time and
room cells are merged across a combined group and only appear once, after
the last member row; they are backfilled onto the other members.
"""
from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, List, Tuple

from .fields import extract_date, extract_location, extract_time_range
from .models import CRN_DIGITS, ExamEntry, FormatVariant, first_occurrence_per_crn
from .normalize import normalize

logger = logging.getLogger(__name__)

# A whole cell, not a prefix: course titles such as "ONLINE MARKETING" can
# sit between rows.
_NO_EXAM_CELL_RE = re.compile(r"^(?:ONLINE|TBA|VIRTUAL|SEE\s+FACULTY(?:\s+.*)?)$", re.I)


class RowMajorParser:
    """Scan CRN-anchored rows and backfill merged date/time cells per group."""

    variant = FormatVariant.ROW_MAJOR_WITH_COMBINED_COLUMN

    def __init__(self, crn_digits: int = CRN_DIGITS):
        self.crn_digits = crn_digits
        self._crn_re = re.compile(rf"^\d{{{crn_digits}}}$")
        self._chain_re = re.compile(rf"^\d{{{crn_digits}}}(?:-\d{{{crn_digits}}})+$")

    @staticmethod
    def matches(text: str) -> bool:
        return bool(re.search(r"FINAL\s+(?:DAY|DATE)|MULTI-SECTION\s+CRNS", text, re.I))

    def parse(self, text: str) -> List[ExamEntry]:
        """Parse raw or already normalized text; normalize() is idempotent."""
        lines = [line.strip() for line in normalize(text).splitlines() if line.strip()]

        records: List[ExamEntry] = []
        no_exam: set[int] = set()
        for i, line in enumerate(lines):
            if not self._crn_re.match(line):
                continue
            record, skipped = self._read_row(lines, i)
            if skipped:
                no_exam.add(len(records))
            records.append(record)

        records = self._backfill(records, no_exam)
        complete = [
            r for idx, r in enumerate(records)
            if idx not in no_exam
            and r.date is not None
            and r.start_time is not None
            and r.end_time is not None
        ]
        logger.debug("Row-major: %d rows, %d complete", len(records), len(complete))
        return first_occurrence_per_crn(complete)

    def _read_row(self, lines: List[str], i: int) -> Tuple[ExamEntry, bool]:
        """
        Read the row anchored at lines[i]. Returns the record and whether the
        row's date cell was a no-exam marker.

        The first cell after the CRN (and chain) is the instructor, who may be
        listed as TBA, so a marker only counts from the second cell on, and
        only if no date follows it within the row.
        """
        crn = int(lines[i])
        record = ExamEntry(crn=crn, combined_crns=[crn])
        j = i + 1

        # Multi-section chain on the next line
        if j < len(lines) and self._chain_re.match(lines[j]):
            record.combined_crns = [int(c) for c in lines[j].split("-")]
            j += 1

        cells = 0
        marker = False
        while j < len(lines):
            line = lines[j]
            if self._crn_re.match(line):
                break

            if record.date is None:
                if _NO_EXAM_CELL_RE.match(line):
                    marker = marker or cells > 0
                    cells += 1
                    j += 1
                    continue
                record.date = extract_date(line)
                if record.date is None:
                    cells += 1
                    j += 1
                    continue

            # The time may share the date's line
            start, end = extract_time_range(line)
            if start is not None:
                record.start_time, record.end_time = start, end
                # Room is the line right after the time, unless a new row starts
                if j + 1 < len(lines) and not self._crn_re.match(lines[j + 1]):
                    record.location = extract_location(lines[j + 1])
                break
            j += 1

        return record, marker and record.date is None

    @staticmethod
    def _backfill(records: List[ExamEntry], no_exam: set[int]) -> List[ExamEntry]:
        """Copy date/time (and room if missing) from a dated sibling in the same group."""
        donors: Dict[Tuple[int, ...], ExamEntry] = {}
        for idx, r in enumerate(records):
            if idx in no_exam or r.date is None:
                continue
            donors.setdefault(tuple(sorted(r.combined_crns)), r)

        filled: List[ExamEntry] = []
        for idx, r in enumerate(records):
            donor = donors.get(tuple(sorted(r.combined_crns)))
            if idx in no_exam or r.date is not None or donor is None:
                filled.append(r)
                continue
            filled.append(replace(
                r,
                date=donor.date,
                start_time=donor.start_time,
                end_time=donor.end_time,
                location=r.location or donor.location,
            ))
        return filled
