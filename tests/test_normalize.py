"""Tests for normalize.py – pdftotext artefact stripping."""
from finals_schedule_export.normalize import normalize


def test_strips_leading_asterisk():
    line = "* ARCH1500  01A  27975  27975-27976  Strong  Friday, April 4, 2025  1:00PM-5:00PM  SEE FACULTY"
    assert normalize(line).startswith("ARCH1500  01A  27975")


def test_asterisk_only_at_line_start():
    assert normalize("14611\n* 14612\nA * B") == "14611\n14612\nA * B"


def test_strips_date_time_change_annotation():
    line = "COMP1050  01A  30886  Rosenberg  Friday, August 8, 2025  12:45PM-2:45PM  WENTW 306  Date & Time Change"
    out = normalize(line)
    assert "Date & Time Change" not in out
    assert out.endswith("WENTW 306")


def test_strips_schedule_as_of_footer():
    out = normalize("Some data\nSchedule as of 06/23/25")
    assert "Schedule as of" not in out
    assert out.startswith("Some data")


def test_strips_updated_prefix():
    assert normalize("UPDATED FALL 2025 FINAL EXAM") == "FALL 2025 FINAL EXAM"
    assert normalize("updated Spring 2026") == "Spring 2026"


def test_updated_without_season_is_kept():
    assert normalize("UPDATED 06/23/25") == "UPDATED 06/23/25"


def test_strips_info_column():
    assert normalize("14611\nFINAL SCHEDULE INFORMATION see website") == "14611\n"


def test_line_breaks_are_preserved():
    text = "14611\n\nDate & Time Change\n\nSchedule as of 06/23/25\n\nWENTW 212\n"
    assert normalize(text).count("\n") == text.count("\n")


def test_idempotent():
    text = "** 27975\nUPDATED FALL 2025\nWENTW 306  Date & Time Change\nSchedule as of 06/23/25"
    once = normalize(text)
    assert normalize(once) == once


def test_clean_text_untouched():
    text = "CRN\n29416\n\nEXAM-DATE\nFriday, April 10, 2026\n"
    assert normalize(text) == text
