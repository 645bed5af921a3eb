"""Tests for registry.py – format detection and the parse entry point."""
import logging
from datetime import date
from textwrap import dedent

import pytest

from finals_schedule_export import (
    ExamEntry,
    FormatVariant,
    UnrecognizedFormatError,
    detect_format,
    parse_finals_schedule,
)
from finals_schedule_export.column_blocks import ColumnBlockParser
from finals_schedule_export.normalize import normalize
from finals_schedule_export.registry import classify, parser_for
from finals_schedule_export.row_major import RowMajorParser
from finals_schedule_export.section_labeled import SectionLabeledParser

COLUMN_BLOCK_DOC = dedent("""\
    FALL 2025 FINAL EXAM SCHEDULE
    COURSE SECTION(S) COMBINED CRNs EXAM-DATE EXAM-TIME-OF-DAY EXAM-ROOM
    14611
    14612-14613-14614
    14619

    Soufan, Anas
    Mulligan, Dikeos, Peters
    Mak, Anthony

    Wednesday, December 10, 2025
    Thursday, December 11, 2025
    Thursday, December 11, 2025

    12:45PM-2:45PM
    12:45PM-2:45PM
    12:45PM-2:45PM

    WENTW 212
    ANXNO 201
    WENTW 214
    Schedule as of 11/20/2025
""")

SECTION_LABELED_DOC = dedent("""\
    SPRING 2026 FINAL EXAM SCHEDULE
    CRN
    29416
    29452
    29465

    INSTRUCTOR
    Kim, Lora
    Peters, Troy, Nolan
    Crossley, Tatjana

    EXAM-DATE
    Friday, April 10, 2026
    ONLINE
    Monday, April 13, 2026

    EXAM-TIME-OF-DAY
    10:15 AM - 12:15 PM
    12:45 PM - 2:45 PM

    EXAM-ROOM
    WENTW 205
    RBSTN 201
""")

ROW_MAJOR_DOC = dedent("""\
    UPDATED SUMMER 2025 FINAL EXAM SCHEDULE
    COURSE NUMBER  SECTION NUMBER  COURSE TITLE  CRN  MULTI-SECTION CRNS  INSTRUCTOR  FINAL DATE  FINAL TIME  FINAL LOCATION
    30864
    30864-30862
    Yari, Nasser
    Friday, August 8, 2025
    12:45PM-2:45PM
    BEATT 426
    30862
    30864-30862
    Yari, Nasser
    Friday, August 8, 2025
    12:45PM-2:45PM
    BEATT 426
    * 30753
    Joseph, Michaelson
    Thursday, August 7, 2025
    1:00PM-5:00PM
    ANXCN 203  Date & Time Change
""")

NO_HEADERS_DOC = dedent("""\
    30753
    Joseph, Michaelson
    Thursday, August 7, 2025
    1:00PM-5:00PM
    ANXCN 203
""")


class TestClassify:
    def test_section_labeled(self):
        text = "CRN\nINSTRUCTOR\nEXAM-DATE\nEXAM-TIME-OF-DAY\nEXAM-ROOM"
        assert classify(text) is FormatVariant.SECTION_LABELED

    def test_combined_crns(self):
        text = "COURSE SECTION(S) COMBINED CRNs EXAM-DATE EXAM-TIME-OF-DAY EXAM-ROOM"
        assert classify(text) is FormatVariant.COLUMN_BLOCK_ZIPPER

    def test_combined_crns_beats_standalone_headers(self):
        text = "COMBINED CRNs\nEXAM-DATE\nEXAM-TIME-OF-DAY\n"
        assert classify(text) is FormatVariant.COLUMN_BLOCK_ZIPPER

    @pytest.mark.parametrize("text", [
        "FINAL DAY FINAL TIME FINAL LOCATION",
        "CRN MULTI-SECTION CRNS FINAL DATE",
        "CRN MULTI-SECTION CRNS INSTRUCTOR",
    ])
    def test_row_major(self, text):
        assert classify(text) is FormatVariant.ROW_MAJOR_WITH_COMBINED_COLUMN

    def test_unknown(self):
        assert classify("COURSE SECTION CRN EXAM-DATE EXAM-ROOM") is None
        assert classify("") is None

    def test_detect_format_normalizes_first(self):
        assert detect_format(ROW_MAJOR_DOC) is FormatVariant.ROW_MAJOR_WITH_COMBINED_COLUMN
        assert detect_format(NO_HEADERS_DOC) is None


class TestParserFor:
    def test_each_variant(self):
        assert isinstance(parser_for(FormatVariant.SECTION_LABELED), SectionLabeledParser)
        assert isinstance(parser_for(FormatVariant.COLUMN_BLOCK_ZIPPER), ColumnBlockParser)
        assert isinstance(
            parser_for(FormatVariant.ROW_MAJOR_WITH_COMBINED_COLUMN), RowMajorParser
        )

    def test_crn_digits_passed_through(self):
        assert parser_for(FormatVariant.COLUMN_BLOCK_ZIPPER, crn_digits=6).crn_digits == 6


class TestParseFinalsSchedule:
    def test_column_blocks(self):
        entries = parse_finals_schedule(COLUMN_BLOCK_DOC)
        by_crn = {e.crn: e for e in entries}
        assert sorted(by_crn) == [14611, 14612, 14613, 14614, 14619]
        for crn in (14612, 14613, 14614):
            assert by_crn[crn] == ExamEntry(
                crn=crn,
                combined_crns=[14612, 14613, 14614],
                date=date(2025, 12, 11),
                start_time=1245,
                end_time=1445,
                location="ANXNO 201",
            )

    def test_section_labeled_skips_online(self):
        entries = parse_finals_schedule(SECTION_LABELED_DOC)
        assert [e.crn for e in entries] == [29416, 29465]
        assert entries[1].start_time == 1245
        assert entries[1].location == "RBSTN 201"

    def test_row_major(self):
        entries = parse_finals_schedule(ROW_MAJOR_DOC)
        assert [e.crn for e in entries] == [30864, 30862, 30753]
        assert entries[2].location == "ANXCN 203"

    def test_row_major_tba_instructor(self):
        text = dedent("""\
            COURSE NUMBER  CRN  MULTI-SECTION CRNS  INSTRUCTOR  FINAL DATE  FINAL TIME  FINAL LOCATION
            30001
            TBA
            Friday, August 8, 2025
            12:45PM-2:45PM
            BEATT 426
            30002
            Doe, Jay
            Friday, August 8, 2025
            3:00PM-5:00PM
            WENTW 212
        """)
        assert [e.crn for e in parse_finals_schedule(text)] == [30001, 30002]

    def test_column_blocks_online_date_keeps_row_alignment(self):
        text = COLUMN_BLOCK_DOC.replace(
            "Thursday, December 11, 2025\nThursday", "ONLINE\nThursday", 1
        )
        entries = parse_finals_schedule(text)
        assert [e.crn for e in entries] == [14611, 14619]
        assert entries[1].location == "WENTW 214"

    def test_unrecognized_format_raises(self):
        with pytest.raises(UnrecognizedFormatError, match="Unrecognized"):
            parse_finals_schedule(NO_HEADERS_DOC)

    def test_unrecognized_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_finals_schedule("nothing to see here")

    def test_best_effort_fallback(self, caplog):
        with caplog.at_level(logging.WARNING):
            entries = parse_finals_schedule(NO_HEADERS_DOC, best_effort=True)
        assert [e.crn for e in entries] == [30753]
        assert entries[0].date == date(2025, 8, 7)
        assert "falling back" in caplog.text

    def test_best_effort_with_nothing_parseable(self):
        assert parse_finals_schedule("nothing to see here", best_effort=True) == []


class TestProperties:
    @pytest.mark.parametrize("doc", [COLUMN_BLOCK_DOC, SECTION_LABELED_DOC, ROW_MAJOR_DOC])
    def test_deterministic(self, doc):
        assert parse_finals_schedule(doc) == parse_finals_schedule(doc)

    @pytest.mark.parametrize("doc", [COLUMN_BLOCK_DOC, SECTION_LABELED_DOC, ROW_MAJOR_DOC])
    def test_group_consistency(self, doc):
        entries = parse_finals_schedule(doc)
        by_crn = {e.crn: e for e in entries}
        for e in entries:
            assert e.crn in e.combined_crns
            for member in e.combined_crns:
                assert by_crn[member].combined_crns == e.combined_crns

    @pytest.mark.parametrize("doc", [COLUMN_BLOCK_DOC, SECTION_LABELED_DOC, ROW_MAJOR_DOC])
    def test_parsers_accept_raw_or_normalized_text(self, doc):
        parser = parser_for(detect_format(doc))
        assert parser.parse(doc) == parser.parse(normalize(doc)) == parse_finals_schedule(doc)

    @pytest.mark.parametrize("doc", [COLUMN_BLOCK_DOC, SECTION_LABELED_DOC, ROW_MAJOR_DOC])
    def test_one_entry_per_crn_with_date_and_time(self, doc):
        entries = parse_finals_schedule(doc)
        assert len({e.crn for e in entries}) == len(entries)
        assert all(e.date is not None and e.start_time is not None for e in entries)
