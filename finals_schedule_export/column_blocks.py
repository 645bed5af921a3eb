"""
Column-block layout (COMBINED CRNs column, e.g. Fall 2025).

pdftotext reflows the wide table one column at a time: all CRN cells come
out together, then instructors, then dates, times and rooms. Row i of the
table is slot i of each block:

    14611
    14612-14613-14614

    Soufan, Anas
    Mulligan, Dikeos, Peters

    Wednesday, December 10, 2025
    Thursday, December 11, 2025

    12:45PM-2:45PM
    12:45PM-2:45PM

    WENTW 212
    ANXNO 201

Every line is classified (crn / date / time / location / other), runs of
same-typed lines become blocks, and each date block is zipped with the
nearest CRN, time and location blocks of the same size. An ONLINE / TBA /
SEE FACULTY cell takes the type of the column it sits in, so a no-exam row
still holds its slot and only that row is skipped.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .fields import extract_date, extract_location, extract_time_range
from .models import CRN_DIGITS, ExamEntry, FormatVariant, first_occurrence_per_crn
from .normalize import normalize

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(
    r"COURSE SECTION|COMBINED CRNs|EXAM-DATE|EXAM-TIME|EXAM-ROOM|"
    r"(?:FALL|SPRING|SUMMER|WINTER) \d{4} FINAL|Page \d+",
    re.I,
)
_WEEKDAY_LINE_RE = re.compile(
    r"^(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),", re.I
)
_BUILDING_TOKEN_RE = re.compile(r"[A-Z]{4,6}\s+\S")
_ROOM_LINE_RE = re.compile(r"^[A-Z]{4,6}\s+\d[\dA-Z]{2,}(?:/[\dA-Z]+)*$", re.I)
_NAMED_ROOM_LINE_RE = re.compile(r"^[A-Z][A-Za-z]+\s+(?:Auditorium|Hall|Center|Room)$", re.I)
_NO_ROOM_LINE_RE = re.compile(r"^(?:ONLINE|TBA|VIRTUAL|SEE\s+FACULTY)\b", re.I)

# Columns a no-exam cell can stand in
_COLUMN_KINDS = ("date", "time", "location")


@dataclass
class _Block:
    start_idx: int
    end_idx: int
    data: List[Any] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.data)


class ColumnBlockParser:
    """Zip CRN / date / time / location column blocks back into rows."""

    variant = FormatVariant.COLUMN_BLOCK_ZIPPER

    def __init__(self, crn_digits: int = CRN_DIGITS):
        self.crn_digits = crn_digits
        self._crn_line_re = re.compile(rf"^\d{{{crn_digits}}}(?:-\d{{{crn_digits}}})*$")

    @staticmethod
    def matches(text: str) -> bool:
        return bool(re.search(r"COMBINED\s+CRNs", text, re.I))

    def parse(self, text: str) -> List[ExamEntry]:
        """Parse raw or already normalized text; normalize() is idempotent."""
        lines: List[str] = []
        paragraphs: List[int] = []
        paragraph = 0
        for raw in normalize(text).splitlines():
            line = raw.strip()
            if not line:
                paragraph += 1
                continue
            if _header_line(line):
                continue
            lines.append(line)
            paragraphs.append(paragraph)

        types = _place_no_exam_cells(
            [self._classify_line(line) for line in lines], paragraphs
        )

        crn_blocks = self._typed_blocks(lines, types, "crn")
        date_blocks = self._typed_blocks(lines, types, "date")
        time_blocks = self._typed_blocks(lines, types, "time")
        location_blocks = self._typed_blocks(lines, types, "location")
        logger.debug(
            "Column blocks: %d crn, %d date, %d time, %d location",
            len(crn_blocks), len(date_blocks), len(time_blocks), len(location_blocks),
        )

        entries: List[ExamEntry] = []
        for date_block in date_blocks:
            n = date_block.size

            # Nearest preceding CRN block with the same row count
            crn_block = _last(
                b for b in crn_blocks if b.end_idx < date_block.start_idx and b.size == n
            )
            if crn_block is None:
                continue

            # Nearest following time block with the same row count
            time_block = _first(
                b for b in time_blocks if b.start_idx > date_block.start_idx and b.size == n
            )
            if time_block is None:
                continue

            # Rooms are optional
            location_block = _first(
                b for b in location_blocks if b.start_idx > time_block.start_idx and b.size == n
            )

            for i in range(n):
                crns = crn_block.data[i]
                exam_date = date_block.data[i]
                start, end = time_block.data[i]
                location = location_block.data[i] if location_block else None

                if not (crns and exam_date and start is not None and end is not None):
                    continue

                for crn in crns:
                    entries.append(ExamEntry(
                        crn=crn,
                        combined_crns=list(crns),
                        date=exam_date,
                        start_time=start,
                        end_time=end,
                        location=location,
                    ))

        # Earliest slot in PDF order wins
        return first_occurrence_per_crn(entries)

    # ── line classification ────────────────────────────────────────

    def _classify_line(self, line: str) -> str:
        if self._crn_only_line(line):
            return "crn"
        if _date_only_line(line):
            return "date"
        if _time_only_line(line):
            return "time"
        if _NO_ROOM_LINE_RE.match(line):
            return "no_exam"
        if _location_only_line(line):
            return "location"
        return "other"

    def _crn_only_line(self, line: str) -> bool:
        """One or more CRNs joined by dashes, possibly with merged runs."""
        return bool(self._crn_line_re.match(self.split_merged_crns(line)))

    def split_merged_crns(self, line: str) -> str:
        """
        pdftotext drops the dash when two CRN cells wrap at the same spot:
        '1458814589' -> '14588-14589'. Only runs that are an exact multiple
        of the CRN width are split.
        """
        width = self.crn_digits

        def _split(m: re.Match) -> str:
            run = m.group(0)
            if len(run) <= width or len(run) % width:
                return run
            return "-".join(run[i:i + width] for i in range(0, len(run), width))

        return re.sub(r"\d+", _split, line)

    def parse_crn_line(self, line: str) -> List[int]:
        crns: List[int] = []
        for token in self.split_merged_crns(line).split("-"):
            token = token.strip()
            if len(token) == self.crn_digits and token.isdigit():
                crn = int(token)
                if crn not in crns:
                    crns.append(crn)
        return crns

    def _typed_blocks(self, lines: List[str], types: List[str], kind: str) -> List[_Block]:
        """Group consecutive lines of one type into blocks of parsed values."""
        blocks: List[_Block] = []
        current: Optional[_Block] = None

        for idx, (line, line_type) in enumerate(zip(lines, types)):
            if line_type != kind:
                if current:
                    blocks.append(current)
                current = None
                continue

            if current is None:
                current = _Block(start_idx=idx, end_idx=idx)
            current.end_idx = idx
            current.data.append(self._parse_value(line, kind))

        if current:
            blocks.append(current)
        return blocks

    def _parse_value(self, line: str, kind: str) -> Any:
        if kind == "crn":
            return self.parse_crn_line(line)
        if kind == "date":
            return extract_date(line)
        if kind == "time":
            return extract_time_range(line)
        return extract_location(line)


def _place_no_exam_cells(types: List[str], paragraphs: List[int]) -> List[str]:
    """
    Give each run of no-exam cells (ONLINE, TBA, SEE FACULTY ...) the type of
    the date, time or location run it sits in, so the row keeps its slot and
    the column is not split in two. A neighbour in the same blank-line
    paragraph is preferred, then the preceding one; with no typed neighbour
    the cell stands as a location.
    """
    resolved = list(types)
    i = 0
    while i < len(types):
        if types[i] != "no_exam":
            i += 1
            continue
        j = i
        while j < len(types) and types[j] == "no_exam":
            j += 1

        candidates = []
        if i > 0 and types[i - 1] in _COLUMN_KINDS:
            candidates.append((paragraphs[i - 1] != paragraphs[i], 0, types[i - 1]))
        if j < len(types) and types[j] in _COLUMN_KINDS:
            candidates.append((paragraphs[j] != paragraphs[j - 1], 1, types[j]))
        kind = min(candidates)[2] if candidates else "location"

        for k in range(i, j):
            resolved[k] = kind
        i = j
    return resolved


def _header_line(line: str) -> bool:
    return bool(_HEADER_RE.search(line))


def _date_only_line(line: str) -> bool:
    return bool(_WEEKDAY_LINE_RE.match(line))


def _time_only_line(line: str) -> bool:
    start, _ = extract_time_range(line)
    if start is None:
        return False
    # "Wednesday, Dec 10 ... 10:15AM-12:15PM"
    if _date_only_line(line):
        return False
    # building code means a location row
    if _BUILDING_TOKEN_RE.search(line):
        return False
    return True


def _location_only_line(line: str) -> bool:
    return bool(
        _ROOM_LINE_RE.match(line)
        or _NAMED_ROOM_LINE_RE.match(line)
        or _NO_ROOM_LINE_RE.match(line)
    )


def _first(blocks):
    return next(iter(blocks), None)


def _last(blocks):
    found = None
    for block in blocks:
        found = block
    return found
