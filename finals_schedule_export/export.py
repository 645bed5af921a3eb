"""
Export final exam entries to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

import icalendar
import pytz

from .models import ExamEntry

# Campus timezone for calendar events
DEFAULT_TIMEZONE = "America/New_York"

# Used when a schedule gives no end time
DEFAULT_EXAM_LENGTH = timedelta(hours=2)

CSV_FIELDS = ["crn", "combined_crns", "date", "start_time", "end_time", "location"]


def _summary(entry: ExamEntry) -> str:
    return f"Final Exam (CRN {entry.crn})"


def _description(entry: ExamEntry) -> str:
    combined = ", ".join(str(c) for c in entry.combined_crns if c != entry.crn)
    desc = f"CRN: {entry.crn}"
    if combined:
        desc += f"\nCombined with: {combined}"
    return desc


def export_ics(
    entries: Iterable[ExamEntry],
    out_path: str | Path,
    tz_name: str = DEFAULT_TIMEZONE,
) -> None:
    """Export exams to iCalendar (.ics) for Apple/Google calendar."""
    tz = pytz.timezone(tz_name)

    cal = icalendar.Calendar()
    cal.add("prodid", "-//Finals Schedule Export//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", "Final Exams")
    cal.add("x-wr-timezone", tz_name)

    for entry in entries:
        start = entry.start_datetime()
        if start is None:
            continue
        end = entry.end_datetime() or start + DEFAULT_EXAM_LENGTH

        event = icalendar.Event()

        # Deterministic UID so re-imports update instead of duplicating
        uid_string = f"{entry.crn}-{start.isoformat()}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@finals-schedule-export")

        event.add("summary", _summary(entry))
        event.add("description", _description(entry))
        if entry.location:
            event.add("location", entry.location)
        event.add("dtstart", tz.localize(start))
        event.add("dtend", tz.localize(end))
        event.add("dtstamp", datetime.now(timezone.utc))

        cal.add_component(event)

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")


def _csv_row(entry: ExamEntry) -> dict:
    row = entry.to_dict()
    row["combined_crns"] = "-".join(str(c) for c in entry.combined_crns)
    return {k: ("" if v is None else v) for k, v in row.items()}


def export_csv(entries: Iterable[ExamEntry], out_path: str | Path) -> None:
    """Export exams to CSV."""
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        w.writeheader()
        w.writerows(_csv_row(e) for e in entries)


def export_json(entries: Iterable[ExamEntry], out_path: str | Path) -> None:
    """Export exams to JSON."""
    Path(out_path).write_text(
        json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def export(
    entries: Iterable[ExamEntry],
    out_path: str | Path,
    fmt: str,
    tz_name: str = DEFAULT_TIMEZONE,
) -> None:
    """Export to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        export_ics(entries, out_path, tz_name)
    elif fmt == "csv":
        export_csv(entries, out_path)
    elif fmt == "json":
        export_json(entries, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")
