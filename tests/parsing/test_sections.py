from __future__ import annotations

import re

from hansard_mine.parsing.sections import (
    BoundaryTier,
    SectionType,
    find_section_end,
    locate_section,
    sections_of,
    split_sections,
)
from hansard_mine.parsing.text import normalize_text

END_MARKER = re.compile(r"TAMAT")


def test_explicit_marker_wins_over_earlier_heading():
    text = "MULA\nisi pertama\n\nBAHAGIAN LAIN\nisi kedua\nTAMAT"

    end, tier = find_section_end(text, 4, end_markers=(END_MARKER,))

    assert tier is BoundaryTier.EXPLICIT_MARKER
    assert end == text.index("TAMAT")


def test_earliest_explicit_marker_is_used():
    text = "MULA\nisi\nAKHIR\nlagi\nTAMAT"

    end, tier = find_section_end(text, 4, end_markers=(END_MARKER, re.compile("AKHIR")))

    assert tier is BoundaryTier.EXPLICIT_MARKER
    assert end == text.index("AKHIR")


def test_heading_closes_section_without_markers():
    text = "MULA\nisi pertama\n\nBAHAGIAN LAIN\nisi kedua"

    end, tier = find_section_end(text, 4)

    assert tier is BoundaryTier.NEXT_HEADING
    assert end == text.index("\n\nBAHAGIAN")


def test_window_caps_section_without_any_signal():
    text = "mula\n" + "x" * 500

    end, tier = find_section_end(text, 5, window=100)
    assert (end, tier) == (105, BoundaryTier.LENGTH_CAP)

    end, tier = find_section_end(text, 5, window=None)
    assert (end, tier) == (len(text), BoundaryTier.LENGTH_CAP)


def test_window_never_passes_end_of_text():
    end, tier = find_section_end("mula\npendek", 5, window=10000)

    assert end == len("mula\npendek")
    assert tier is BoundaryTier.LENGTH_CAP


def test_locate_section_returns_none_without_marker():
    assert locate_section("tiada apa-apa", re.compile("KEHADIRAN")) is None


def test_locate_section_reports_bounds():
    text = "Pembuka\nKEHADIRAN\nsenarai ahli\nTAMAT"

    bounds = locate_section(text, re.compile("KEHADIRAN"), end_markers=(END_MARKER,))

    assert bounds is not None
    assert bounds.marker_start == text.index("KEHADIRAN")
    assert bounds.slice(text) == "\nsenarai ahli\n"
    assert bounds.tier is BoundaryTier.EXPLICIT_MARKER


def test_split_sections_on_transcript(transcript_text):
    sections = split_sections(normalize_text(transcript_text))

    assert [section.type for section in sections] == [
        SectionType.QUESTIONS_ORAL,
        SectionType.BILL,
        SectionType.MOTION,
    ]
    oral, bill, motion = sections
    assert oral.content.startswith("PERTANYAAN-PERTANYAAN BAGI JAWAB LISAN")
    assert "Rang Undang-undang Perbekalan 2026" in bill.content
    assert "Ahmad Zulkifli" not in bill.content
    assert oral.tier is BoundaryTier.EXPLICIT_MARKER
    assert motion.tier is BoundaryTier.LENGTH_CAP
    assert motion.content.endswith("Dewan ditangguhkan pada pukul 5.30 petang.")


def test_split_sections_drops_short_sections():
    text = "USUL\n\nTiada.\n\nRANG UNDANG-UNDANG\n\n" + "Rang Undang-undang Cukai Jualan dibaca kali kedua. " * 3

    sections = split_sections(text)

    assert [section.type for section in sections] == [SectionType.BILL]


def test_sections_of_filters_by_type(transcript_text):
    sections = split_sections(normalize_text(transcript_text))

    selected = sections_of(sections, SectionType.BILL, SectionType.MOTION)

    assert [section.type for section in selected] == [SectionType.BILL, SectionType.MOTION]
