"""Whitespace normalization and session header extraction."""
from __future__ import annotations

from datetime import date
from pathlib import PurePath
from typing import List, Optional
import logging
import re

from ..core.types import UNKNOWN, SessionMetadata
from .sections import locate_section

LOGGER = logging.getLogger(__name__)

_HORIZONTAL_SPACE = re.compile(r"[ \t]+")
_LINE_ENDINGS = re.compile(r"\r\n?")

_MONTHS = {
    "januari": 1,
    "january": 1,
    "februari": 2,
    "february": 2,
    "mac": 3,
    "march": 3,
    "april": 4,
    "mei": 5,
    "may": 5,
    "jun": 6,
    "june": 6,
    "julai": 7,
    "july": 7,
    "ogos": 8,
    "august": 8,
    "september": 9,
    "oktober": 10,
    "october": 10,
    "november": 11,
    "disember": 12,
    "december": 12,
}
_MONTH_ALTERNATION = "|".join(sorted(_MONTHS, key=len, reverse=True))

_SESSION_NUMBER_PATTERN = re.compile(r"\bBil\.\s*(\d+)\b(?!\.\d)")
_DATE_PATTERN = re.compile(rf"\b(\d{{1,2}})\s+({_MONTH_ALTERNATION})\s+(\d{{4}})\b", re.IGNORECASE)
_NUMERIC_DATE_PATTERN = re.compile(r"\b(?:DR|Bil)\.\s*(\d{1,2})\.(\d{1,2})\.(\d{4})\b", re.IGNORECASE)
_FILENAME_DATE_PATTERN = re.compile(r"DR-(\d{2})(\d{2})(\d{4})", re.IGNORECASE)
_TERM_PATTERN = re.compile(r"PARLIMEN[ \t]+([^\n]*?)[ \t]*(?=\n|PENGGAL|$)")
_SITTING_PATTERN = re.compile(r"PENGGAL[ \t]+([^\n]+)")

_MALAY_ORDINALS = {
    "pertama": 1,
    "kedua": 2,
    "ketiga": 3,
    "keempat": 4,
    "kelima": 5,
    "keenam": 6,
    "ketujuh": 7,
    "kelapan": 8,
    "kesembilan": 9,
    "kesepuluh": 10,
    "kesebelas": 11,
    "kedua belas": 12,
    "ketiga belas": 13,
    "keempat belas": 14,
    "kelima belas": 15,
    "keenam belas": 16,
    "ketujuh belas": 17,
}
_ROMAN_TERMS = {
    "xi": 11,
    "xii": 12,
    "xiii": 13,
    "xiv": 14,
    "xv": 15,
    "xvi": 16,
    "xvii": 17,
}


def normalize_text(raw_text: str) -> str:
    """Collapse runs of spaces and tabs while keeping line breaks intact."""

    return _HORIZONTAL_SPACE.sub(" ", _LINE_ENDINGS.sub("\n", raw_text))


def _build_date(day: str, month: int, year: str) -> Optional[date]:
    try:
        return date(int(year), month, int(day))
    except ValueError:
        return None


def _date_from_filename(filename: str) -> Optional[date]:
    match = _FILENAME_DATE_PATTERN.search(PurePath(filename).name)
    if not match:
        return None
    day, month, year = match.groups()
    return _build_date(day, int(month), year)


def extract_metadata(text: str, filename: Optional[str] = None) -> SessionMetadata:
    """Extract the session header fields of ``text``.

    Every field is searched for independently. Fields that cannot be located
    resolve to :data:`~hansard_mine.core.types.UNKNOWN`.
    """

    session_match = _SESSION_NUMBER_PATTERN.search(text)
    session_number = session_match.group(1) if session_match else UNKNOWN

    session_date = UNKNOWN
    parsed_date: Optional[date] = None
    date_match = _DATE_PATTERN.search(text)
    if date_match:
        day, month_name, year = date_match.groups()
        session_date = " ".join(date_match.group(0).split())
        parsed_date = _build_date(day, _MONTHS[month_name.lower()], year)
    else:
        numeric_match = _NUMERIC_DATE_PATTERN.search(text)
        if numeric_match:
            day, month, year = numeric_match.groups()
            parsed_date = _build_date(day, int(month), year)
            if parsed_date:
                session_date = parsed_date.isoformat()
    if parsed_date is None and filename:
        parsed_date = _date_from_filename(filename)
        if parsed_date:
            session_date = parsed_date.isoformat()
            LOGGER.debug("Session date for %s taken from the filename", filename)

    term_match = _TERM_PATTERN.search(text)
    parliament_term = term_match.group(1).strip() if term_match and term_match.group(1).strip() else UNKNOWN

    sitting_match = _SITTING_PATTERN.search(text)
    sitting = sitting_match.group(1).strip() if sitting_match else UNKNOWN

    return SessionMetadata(
        session_number=session_number,
        session_date=session_date,
        parliament_term=parliament_term,
        sitting=sitting,
        parsed_date=parsed_date,
    )


def normalize_parliament_term(term: str) -> str:
    """Map term labels such as ``KELIMA BELAS`` or ``XV`` to ``15th Parliament``.

    Unrecognised labels are returned unchanged.
    """

    lowered = " ".join(term.lower().replace("-", " ").split())
    number: Optional[int] = None
    for label in sorted(_MALAY_ORDINALS, key=len, reverse=True):
        if re.search(rf"\b{label}\b", lowered):
            number = _MALAY_ORDINALS[label]
            break
    if number is None:
        digits = re.search(r"\b(?:ke\s*)?(\d{1,2})(?:st|nd|rd|th)?\b", lowered)
        if digits:
            number = int(digits.group(1))
    if number is None:
        for numeral, value in _ROMAN_TERMS.items():
            if re.search(rf"\b{numeral}\b", lowered):
                number = value
                break
    if number is None:
        return term
    return f"{number}{_ordinal_suffix(number)} Parliament"


def _ordinal_suffix(number: int) -> str:
    if 10 <= number % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


_TOC_START = re.compile(r"KANDUNGAN")
_TOC_END_MARKERS = (re.compile(r"KEHADIRAN"), re.compile(r"DR\."))
_TOC_TOPIC = re.compile(r"^([A-Z][A-Z \-]+):", re.MULTILINE)
_COMMON_TOPICS = (
    "Supply Bill",
    "Development Budget",
    "Question Time",
    "Motion",
    "Adjournment",
    "Committee Stage",
)


def extract_topics(text: str, limit: int = 10) -> List[str]:
    """Collect headline topics from the table of contents."""

    topics: List[str] = []
    bounds = locate_section(text, _TOC_START, end_markers=_TOC_END_MARKERS, use_heading=False)
    if bounds is not None:
        for match in _TOC_TOPIC.finditer(bounds.slice(text)):
            topic = match.group(1).strip()
            if len(topic) > 3 and topic not in topics:
                topics.append(topic)

    lowered = text.lower()
    for topic in _COMMON_TOPICS:
        if topic.lower() in lowered and topic not in topics:
            topics.append(topic)
    return topics[:limit]


__all__ = ["extract_metadata", "extract_topics", "normalize_parliament_term", "normalize_text"]
