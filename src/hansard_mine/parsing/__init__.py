"""Parsing helpers for Hansard transcripts."""
from __future__ import annotations

from .attendance import classify_attendance, extract_attendance, parse_entries
from .bills import classify_status, parse_bills, parse_motions
from .blocks import EntryBlockSplitter, split_blocks
from .questions import parse_questions
from .sections import HansardSection, SectionType, find_section_end, locate_section, split_sections
from .speakers import SpeakerExtraction, extract_speakers
from .text import extract_metadata, extract_topics, normalize_parliament_term, normalize_text

__all__ = [
    "EntryBlockSplitter",
    "HansardSection",
    "SectionType",
    "SpeakerExtraction",
    "classify_attendance",
    "classify_status",
    "extract_attendance",
    "extract_metadata",
    "extract_speakers",
    "extract_topics",
    "find_section_end",
    "locate_section",
    "normalize_parliament_term",
    "normalize_text",
    "parse_bills",
    "parse_entries",
    "parse_motions",
    "parse_questions",
    "split_blocks",
    "split_sections",
]
