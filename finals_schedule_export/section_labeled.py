"""
Section-labeled layout (INSTRUCTOR column, no COMBINED CRNs, e.g. Spring 2026).

pdftotext renders the table one named column at a time per page:

    COURSE SECTION(S) COURSE TITLE   course codes + titles, ignored
    CRN                              one CRN per line
    INSTRUCTOR                       ignored
    EXAM-DATE                        date, or ONLINE / SEE FACULTY / TBA
    EXAM-TIME-OF-DAY                 only rows with a real date
    EXAM-ROOM                        only rows with a real date

CRN and EXAM-DATE have one line per row. Rows without a scheduled exam leave
their time and room cells empty, so those two columns are shorter and are
walked with a separate cursor that only advances on real rows.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from .fields import extract_date, extract_location, extract_time_range, no_exam_entry
from .models import CRN_DIGITS, ExamEntry, FormatVariant, first_occurrence_per_crn
from .normalize import normalize

logger = logging.getLogger(__name__)

_SECTION_STATES = {
    "CRN": "crn",
    "INSTRUCTOR": None,
    "EXAM-DATE": "exam_date",
    "EXAM-TIME-OF-DAY": "exam_time",
    "EXAM-ROOM": "exam_room",
}

# Page furniture that lands inside the EXAM-ROOM column when it is the last
# column on a page. Add new artefacts here as they show up.
ROOM_NOISE_PATTERNS = [
    re.compile(r"^\d+\s+of\s+\d+$", re.I),                             # "1 of 17"
    re.compile(r"^(?:SPRING|FALL|SUMMER|WINTER)\s+\d{4}\b", re.I),     # "SPRING 2026 ..."
    re.compile(r"^FINAL EXAM SCHEDULE$", re.I),
    re.compile(r"^Page\s+\d+", re.I),
]

_STANDALONE_DATE_HEADER_RE = re.compile(r"^EXAM-DATE[ \t]*$", re.M)
_STANDALONE_TIME_HEADER_RE = re.compile(r"^EXAM-TIME-OF-DAY[ \t]*$", re.M)


def room_noise(line: str) -> bool:
    return any(p.search(line) for p in ROOM_NOISE_PATTERNS)


class SectionLabeledParser:
    """Walk named column sections and realign times/rooms around no-exam rows."""

    variant = FormatVariant.SECTION_LABELED

    def __init__(self, crn_digits: int = CRN_DIGITS):
        self.crn_digits = crn_digits
        self._crn_re = re.compile(rf"^\d{{{crn_digits}}}$")

    @staticmethod
    def matches(text: str) -> bool:
        # EXAM-DATE also occurs inline in the COMBINED CRNs header row, so
        # only standalone header lines count.
        if re.search(r"COMBINED\s+CRNs", text, re.I):
            return False
        return bool(
            _STANDALONE_DATE_HEADER_RE.search(text)
            and _STANDALONE_TIME_HEADER_RE.search(text)
        )

    def parse(self, text: str) -> List[ExamEntry]:
        """Parse raw or already normalized text; normalize() is idempotent."""
        crns: List[int] = []
        dates: List[str] = []
        times: List[Tuple[int, int | None]] = []
        rooms: List[str] = []
        state: Optional[str] = None

        for raw in normalize(text).splitlines():
            line = raw.strip()
            if not line:
                continue

            if line in _SECTION_STATES:
                state = _SECTION_STATES[line]
                continue
            if line.upper().startswith("COURSE SECTION"):
                state = None
                continue

            if state == "crn":
                if self._crn_re.match(line):
                    crns.append(int(line))
            elif state == "exam_date":
                # Keep no-exam markers so dates stay aligned with CRNs
                if extract_date(line) or no_exam_entry(line):
                    dates.append(line)
            elif state == "exam_time":
                start, end = extract_time_range(line)
                if start is not None:
                    times.append((start, end))
            elif state == "exam_room":
                if room_noise(line):
                    continue
                location = extract_location(line)
                if location:
                    rooms.append(location)

        logger.debug(
            "Sections: %d CRNs, %d dates, %d times, %d rooms",
            len(crns), len(dates), len(times), len(rooms),
        )
        if len(crns) != len(dates):
            logger.warning(
                "CRN column has %d rows but EXAM-DATE has %d", len(crns), len(dates)
            )
        return self._build_entries(crns, dates, times, rooms)

    def _build_entries(
        self,
        crns: List[int],
        dates: List[str],
        times: List[Tuple[int, int | None]],
        rooms: List[str],
    ) -> List[ExamEntry]:
        cursor = 0
        entries: List[ExamEntry] = []

        for crn, date_line in zip(crns, dates):
            # ONLINE / SEE FACULTY / TBA rows have no time or room cell
            if no_exam_entry(date_line):
                continue

            exam_date = extract_date(date_line)
            if exam_date is None:
                continue

            start, end = times[cursor] if cursor < len(times) else (None, None)
            location = rooms[cursor] if cursor < len(rooms) else None
            cursor += 1

            if start is None:
                continue

            entries.append(ExamEntry(
                crn=crn,
                combined_crns=[crn],
                date=exam_date,
                start_time=start,
                end_time=end,
                location=location,
            ))

        return first_occurrence_per_crn(entries)
