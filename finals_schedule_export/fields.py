"""
Field extractors shared by every finals schedule layout.

All functions take a single line (or short span) of pdftotext output and
return None / (None, None) when nothing usable is found. They never raise.
"""
from __future__ import annotations

import logging
import re
from datetime import date

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────
#  Dates
# ──────────────────────────────────────────────────────────────────

_MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_MONTH_ABBR = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH_NAMES = "|".join(_MONTHS)

# "Monday, December 8, 2025"
_WEEKDAY_DATE_RE = re.compile(
    r"\b(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),?\s+"
    rf"({_MONTH_NAMES})\s+(\d{{1,2}}),?\s+(\d{{4}})\b",
    re.I,
)
# "December 8, 2025" / "December 8 2025"
_LONG_DATE_RE = re.compile(rf"\b({_MONTH_NAMES})\s+(\d{{1,2}}),?\s+(\d{{4}})\b", re.I)
# "Dec 8, 2025" / "Sept. 8, 2025"
_SHORT_DATE_RE = re.compile(
    r"\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\.?\s+(\d{1,2}),?\s+(\d{4})\b",
    re.I,
)
# "12/08/2025"
_NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")


def _month_number(name: str) -> int:
    name = name.lower()
    if name in _MONTHS:
        return _MONTHS.index(name) + 1
    return _MONTH_ABBR[name]


def _safe_date(year: int, month: int, day: int, line: str) -> date | None:
    try:
        return date(year, month, day)
    except ValueError as e:
        logger.warning("Failed to parse date from %r: %s", line.strip(), e)
        return None


def extract_date(line: str) -> date | None:
    """
    Find the exam date on a line. Anything after the date (typically a time
    range) is ignored.
    """
    for pattern in (_WEEKDAY_DATE_RE, _LONG_DATE_RE, _SHORT_DATE_RE):
        m = pattern.search(line)
        if m:
            month, day, year = m.groups()
            return _safe_date(int(year), _month_number(month), int(day), line)

    m = _NUMERIC_DATE_RE.search(line)
    if m:
        month, day, year = m.groups()
        return _safe_date(int(year), int(month), int(day), line)

    return None


# ──────────────────────────────────────────────────────────────────
#  Times
# ──────────────────────────────────────────────────────────────────

_CLOCK = r"(\d{1,2})(?::(\d{2}))?\s*([AP]M)"

# "8:00AM-10:00AM", "10:15 AM - 12:15 PM", "9:00AM - 1PM"
_TIME_RANGE_RE = re.compile(rf"(?<!\d){_CLOCK}\s*[-–]\s*{_CLOCK}", re.I)
# "0800-1000"
_MILITARY_RANGE_RE = re.compile(r"(?<!\d)(\d{4})\s*[-–]\s*(\d{4})(?!\d)")


def convert_to_24h(hour: int, meridiem: str) -> int:
    """12AM -> 0, 12PM -> 12, 1PM -> 13."""
    hour %= 12
    if meridiem.upper() == "PM":
        hour += 12
    return hour


def _encode(hour: int, minutes: str | None, meridiem: str) -> int:
    return convert_to_24h(hour, meridiem) * 100 + int(minutes or 0)


def _valid_military(value: str) -> bool:
    return int(value[:2]) < 24 and int(value[2:]) < 60


def extract_time_range(line: str) -> tuple[int | None, int | None]:
    """
    Parse a start/end time range into 24h integers, e.g.
    '10:15 AM - 12:15 PM' -> (1015, 1215).
    """
    m = _TIME_RANGE_RE.search(line)
    if m:
        h1, m1, ap1, h2, m2, ap2 = m.groups()
        return _encode(int(h1), m1, ap1), _encode(int(h2), m2, ap2)

    m = _MILITARY_RANGE_RE.search(line)
    if m and _valid_military(m.group(1)) and _valid_military(m.group(2)):
        return int(m.group(1)), int(m.group(2))

    return None, None


# ──────────────────────────────────────────────────────────────────
#  Locations
# ──────────────────────────────────────────────────────────────────

# Page headers like "SPRING 2026" otherwise look like building + room.
_SEASON_LINE_RE = re.compile(r"^(?:SPRING|FALL|SUMMER|WINTER)\s+\d{4}$", re.I)

# "ANXNO 201", "CEIS 414A/B", "ANXSO 002/004". The room must start with a
# digit and be at least 3 characters, so "STUDIO 01" is not a room.
_ROOM_RE = re.compile(r"\b([A-Z]{4,6})\s+(\d[\dA-Z]{2,}(?:/[\dA-Z]+)*)\s*$", re.I)

# "WATSN Auditorium", "Sargent Hall"
_NAMED_ROOM_RE = re.compile(r"([A-Z][A-Za-z]+\s+(?:Auditorium|Hall|Center|Room))\s*$")

_VIRTUAL_RE = re.compile(r"\b(ONLINE|TBA|VIRTUAL)\b", re.I)
_SEE_FACULTY_RE = re.compile(r"SEE\s+FACULTY", re.I)
_BARE_BUILDING_RE = re.compile(r"^([A-Z]{4,6})$")


def expand_room_list(building: str, rooms: str) -> str:
    """
    'ANXSO', '002/004' -> 'ANXSO 002 / ANXSO 004'
    'CEIS', '414A/B'   -> 'CEIS 414A / CEIS 414B'
    """
    parts = rooms.split("/")
    if len(parts) == 1:
        return f"{building} {rooms}"

    expanded = []
    base_number = None
    for part in parts:
        digits = re.match(r"\d+", part)
        if digits:
            base_number = digits.group(0)
            expanded.append(f"{building} {part}")
        elif base_number and part.isalpha():
            expanded.append(f"{building} {base_number}{part}")
        else:
            expanded.append(f"{building} {part}")
    return " / ".join(expanded)


def extract_location(line: str) -> str | None:
    """Find the exam room at the end of a line."""
    text = line.strip()
    if _SEASON_LINE_RE.match(text):
        return None

    m = _ROOM_RE.search(text)
    if m:
        building, rooms = m.groups()
        return expand_room_list(building, rooms)

    m = _NAMED_ROOM_RE.search(text)
    if m:
        return m.group(1).strip()

    m = _VIRTUAL_RE.search(text)
    if m:
        return m.group(1).upper()

    if _SEE_FACULTY_RE.search(text):
        return "SEE FACULTY"

    m = _BARE_BUILDING_RE.match(text)
    if m:
        return m.group(1)

    return None


# ──────────────────────────────────────────────────────────────────
#  No-exam markers
# ──────────────────────────────────────────────────────────────────

_NO_EXAM_RE = re.compile(r"(?:ONLINE|TBA|VIRTUAL|SEE\s+FACULTY)\b", re.I)


def no_exam_entry(line: str) -> bool:
    """True for ONLINE / SEE FACULTY / TBA / VIRTUAL: no scheduled exam."""
    return bool(_NO_EXAM_RE.match(line.strip()))
